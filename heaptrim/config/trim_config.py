#!filepath: heaptrim/config/trim_config.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class EarlyClockPolicy(str, Enum):
    """What happens to clock updates seen before the threshold is crossed."""

    AUTO = "auto"    # keep with preserve_time, clamp otherwise
    KEEP = "keep"    # verbatim, preserve_time only
    CLAMP = "clamp"  # rewritten to max(0, t - threshold)
    DROP = "drop"

    def resolve(self, preserve_time: bool) -> "EarlyClockPolicy":
        if self is EarlyClockPolicy.AUTO:
            return EarlyClockPolicy.KEEP if preserve_time else EarlyClockPolicy.CLAMP
        return self


class TrimConfig(BaseModel):
    skip_seconds: Optional[float] = None  # required at run time
    preserve_time: bool = False
    buffer_size: int = 1 << 15
    early_clock: EarlyClockPolicy = EarlyClockPolicy.AUTO
    compact_allocations: bool = False
    catalog: str = "heaptrack"  # packaged catalog name or YAML path
    progress_interval: int = 1_000_000

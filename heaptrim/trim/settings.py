#!filepath: heaptrim/trim/settings.py
from __future__ import annotations

import math
from dataclasses import dataclass

from heaptrim.config.trim_config import EarlyClockPolicy, TrimConfig
from heaptrim.utils.errors import ConfigError
from .catalog import TagCatalog
from .reader import DEFAULT_BUFFER_SIZE


@dataclass(frozen=True)
class TrimSettings:
    """
    Fixed run parameters handed to the engine (immutable for the run).

    threshold is in clock ticks of the catalog (heaptrack: milliseconds).
    """

    threshold: int
    preserve_time: bool = False
    buffer_size: int = DEFAULT_BUFFER_SIZE
    early_clock: EarlyClockPolicy = EarlyClockPolicy.AUTO
    compact_allocations: bool = False
    progress_interval: int = 1_000_000

    def __post_init__(self):
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, int):
            raise ConfigError(f"threshold must be an integer tick count, got {self.threshold!r}")
        if self.threshold < 0:
            raise ConfigError(f"threshold must be >= 0, got {self.threshold}")
        if self.buffer_size <= 0:
            raise ConfigError(f"buffer_size must be > 0, got {self.buffer_size}")
        if self.progress_interval < 0:
            raise ConfigError(f"progress_interval must be >= 0, got {self.progress_interval}")
        try:
            early_clock = EarlyClockPolicy(self.early_clock).resolve(self.preserve_time)
        except ValueError:
            raise ConfigError(f"unknown early_clock policy: {self.early_clock!r}") from None
        if early_clock == EarlyClockPolicy.KEEP and not self.preserve_time:
            raise ConfigError("early_clock=keep requires preserve_time")
        object.__setattr__(self, "early_clock", early_clock)

    # --------------------------------------------------
    @classmethod
    def from_config(cls, cfg: TrimConfig, catalog: TagCatalog) -> "TrimSettings":
        if cfg.skip_seconds is None:
            raise ConfigError("skip_seconds is required")

        return cls(
            threshold=seconds_to_ticks(cfg.skip_seconds, catalog.clock.ticks_per_second),
            preserve_time=cfg.preserve_time,
            buffer_size=cfg.buffer_size,
            early_clock=EarlyClockPolicy(cfg.early_clock),
            compact_allocations=cfg.compact_allocations,
            progress_interval=cfg.progress_interval,
        )


def seconds_to_ticks(seconds: float, ticks_per_second: int) -> int:
    if not math.isfinite(seconds):
        raise ConfigError(f"skip_seconds must be finite, got {seconds}")
    if seconds < 0:
        raise ConfigError(f"skip_seconds must be >= 0, got {seconds}")
    return int(round(seconds * ticks_per_second))

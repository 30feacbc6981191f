#!filepath: heaptrim/trim/policy.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from heaptrim.config.trim_config import EarlyClockPolicy
from .catalog import TagSpec
from .clock import ClockState
from .record import RecordKind


class Disposition(str, Enum):
    KEEP = "keep"        # write verbatim
    REWRITE = "rewrite"  # write with its time value re-based
    DROP = "drop"


class RetentionPolicy:
    """
    Decision table:

    | kind                | pre-threshold       | post-threshold             |
    |---------------------|---------------------|----------------------------|
    | definition / opaque | keep                | keep                       |
    | clock update        | early_clock policy  | rewrite (keep if preserve) |
    | timed event         | drop                | keep (rewrite if timed)    |

    Clock updates are decided on the state *after* they were applied, so the
    record that crosses the threshold is already post-threshold.
    """

    def __init__(
        self,
        *,
        preserve_time: bool = False,
        early_clock: EarlyClockPolicy = EarlyClockPolicy.AUTO,
    ):
        self.preserve_time = preserve_time
        self.early_clock = EarlyClockPolicy(early_clock).resolve(preserve_time)

    # ----------------------------------------------
    def decide(
        self,
        kind: RecordKind,
        state: ClockState,
        spec: Optional[TagSpec] = None,
    ) -> Disposition:
        if kind.always_retained:
            return Disposition.KEEP

        if kind == RecordKind.CLOCK_UPDATE:
            if state.crossed:
                return self._time_bearing()
            if self.early_clock == EarlyClockPolicy.DROP:
                return Disposition.DROP
            if self.early_clock == EarlyClockPolicy.CLAMP:
                return self._time_bearing()
            return Disposition.KEEP

        if kind == RecordKind.TIMED_EVENT:
            if not state.crossed:
                return Disposition.DROP
            if spec is not None and spec.time_field is not None:
                return self._time_bearing()
            return Disposition.KEEP

        raise ValueError(f"unhandled record kind: {kind!r}")

    def _time_bearing(self) -> Disposition:
        return Disposition.KEEP if self.preserve_time else Disposition.REWRITE

#!filepath: heaptrim/trim/clock.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

from heaptrim import logs
from heaptrim.utils.errors import ConfigError, FormatError
from .catalog import ClockSpec
from .record import RawRecord
from .rewriter import read_field


@dataclass(frozen=True, slots=True)
class PreThreshold:
    """Still skipping: timed events are history."""


@dataclass(frozen=True, slots=True)
class PostThreshold:
    """Threshold crossed; retained time values are shifted by origin_shift."""

    origin_shift: int


Phase = Union[PreThreshold, PostThreshold]


@dataclass(frozen=True, slots=True)
class ClockState:
    """
    The only state carried from record to record.

    elapsed : clock ticks since profile start, never decreases
    phase   : PreThreshold -> PostThreshold, one way
    """

    elapsed: int = 0
    phase: Phase = PreThreshold()

    @property
    def crossed(self) -> bool:
        return isinstance(self.phase, PostThreshold)

    @property
    def origin_shift(self) -> Optional[int]:
        return self.phase.origin_shift if isinstance(self.phase, PostThreshold) else None


class ClockTracker:
    """
    Folds clock-update records into a ClockState.

    advance() never mutates: it returns the next state.
    """

    def __init__(self, threshold: int, spec: ClockSpec):
        if threshold < 0:
            raise ConfigError(f"threshold must be >= 0, got {threshold}")
        self.threshold = threshold
        self.spec = spec

    # ----------------------------------------------
    def initial(self) -> ClockState:
        """
        elapsed starts at 0, so a zero threshold is crossed before the
        first record.
        """
        if self.threshold == 0:
            return ClockState(elapsed=0, phase=PostThreshold(origin_shift=0))
        return ClockState()

    def read(self, record: RawRecord) -> int:
        return read_field(record, self.spec.field_index, self.spec.radix)

    def advance(self, state: ClockState, record: RawRecord) -> ClockState:
        value = self.read(record)

        if self.spec.mode == "delta":
            elapsed = state.elapsed + value
        else:
            if value < state.elapsed:
                raise FormatError(
                    f"clock went backwards: {value} after {state.elapsed} "
                    f"({record.line[:64]!r})"
                )
            elapsed = value

        if state.crossed or elapsed < self.threshold:
            return replace(state, elapsed=elapsed)

        logs.info(
            f"[Clock] stopped skipping at profile timestamp {elapsed}, writing all data now"
        )
        return ClockState(elapsed=elapsed, phase=PostThreshold(origin_shift=self.threshold))

#!filepath: heaptrim/trim/compaction.py
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .catalog import AllocationIndexSpec
from .clock import ClockState
from .record import RawRecord
from .rewriter import format_int, read_field


@dataclass(frozen=True, slots=True)
class CompactionState:
    """
    correction: largest allocation index referenced before the threshold,
                -1 while nothing was skipped
    """

    correction: int = -1


class AllocationCompactor:
    """
    Opt-in renumbering of allocation indices (``--compact-allocations``).

    heaptrack-gui indexes allocation infos positionally and expects the
    first index referenced by +/- records to be 0, each new one at most one
    past the largest seen. Without compaction the retained +/- records point
    far into the table and the viewer can crash.

    - before the threshold: allocation-info definitions are dropped, the
      largest referenced index becomes the correction
    - after the threshold: references <= correction are dropped, the others
      become ``index - correction - 1``

    Returns ``None`` for a dropped record.
    """

    def __init__(self, spec: AllocationIndexSpec):
        self.spec = spec
        self._definition_tag: bytes = spec.definition_tag.encode("ascii")
        self._reference_tags: FrozenSet[bytes] = frozenset(
            t.encode("ascii") for t in spec.reference_tags
        )

    def initial(self) -> CompactionState:
        return CompactionState()

    def handles(self, record: RawRecord) -> bool:
        tag = record.tag
        return tag == self._definition_tag or tag in self._reference_tags

    # ----------------------------------------------
    def apply(
        self,
        state: CompactionState,
        clock: ClockState,
        record: RawRecord,
    ) -> Tuple[CompactionState, Optional[RawRecord]]:
        if record.tag == self._definition_tag:
            return state, (record if clock.crossed else None)

        index = read_field(record, self.spec.field_index, self.spec.radix)

        if not clock.crossed:
            if index > state.correction:
                state = CompactionState(correction=index)
            return state, None

        if index <= state.correction:
            return state, None

        new_index = index - state.correction - 1
        if new_index == index:
            return state, record
        return state, record.with_field(
            self.spec.field_index, format_int(new_index, self.spec.radix)
        )

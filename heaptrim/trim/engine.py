#!filepath: heaptrim/trim/engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from heaptrim import logs
from heaptrim.engines.base import BaseEngine
from .catalog import TagCatalog, TagSpec
from .classifier import RecordClassifier
from .clock import ClockState, ClockTracker
from .compaction import AllocationCompactor, CompactionState
from .policy import Disposition, RetentionPolicy
from .record import RawRecord, RecordKind
from .rewriter import TimestampRewriter
from .settings import TrimSettings
from .stats import TrimStats


@dataclass(frozen=True, slots=True)
class EngineState:
    clock: ClockState
    compaction: CompactionState = CompactionState()


class Decision(NamedTuple):
    kind: RecordKind
    disposition: Disposition
    output: Optional[RawRecord]  # None when dropped


class TrimEngine(BaseEngine[RawRecord, RawRecord]):
    """
    Input: RawRecord
    Output: the record to write (verbatim or re-based), or None

    step() is pure: state in, state out. process() keeps the current state
    for stream use and counts stats.
    """

    def __init__(
        self,
        settings: TrimSettings,
        catalog: TagCatalog,
        stats: Optional[TrimStats] = None,
    ):
        self.settings = settings
        self.catalog = catalog
        self.stats = stats if stats is not None else TrimStats()

        self.classifier = RecordClassifier(catalog)
        self.tracker = ClockTracker(settings.threshold, catalog.clock)
        self.policy = RetentionPolicy(
            preserve_time=settings.preserve_time,
            early_clock=settings.early_clock,
        )
        self.rewriter = TimestampRewriter()

        self.compactor: Optional[AllocationCompactor] = None
        if settings.compact_allocations:
            if catalog.allocation_index is None:
                logs.warning(
                    f"[Trim] catalog {catalog.name} has no allocation_index section, "
                    f"compaction disabled"
                )
            else:
                self.compactor = AllocationCompactor(catalog.allocation_index)

        self.state = self.initial()

    # --------------------------------------------------
    def initial(self) -> EngineState:
        return EngineState(clock=self.tracker.initial())

    def step(self, state: EngineState, record: RawRecord) -> Tuple[EngineState, Decision]:
        kind = self.classifier.classify(record)
        spec = self.classifier.spec_for(record)

        clock = state.clock
        if kind == RecordKind.CLOCK_UPDATE:
            clock = self.tracker.advance(clock, record)

        disposition = self.policy.decide(kind, clock, spec)
        compaction = state.compaction

        if self.compactor is not None and self.compactor.handles(record):
            compaction, compacted = self.compactor.apply(compaction, clock, record)
            if compacted is None:
                disposition = Disposition.DROP
            elif compacted is not record:
                record = compacted
                if disposition == Disposition.KEEP:
                    disposition = Disposition.REWRITE

        if disposition == Disposition.DROP:
            output = None
        elif disposition == Disposition.REWRITE:
            output = self._rebase(record, kind, spec, clock)
        else:
            output = record

        return EngineState(clock=clock, compaction=compaction), Decision(kind, disposition, output)

    def process(self, event: RawRecord) -> Optional[RawRecord]:
        self.state, decision = self.step(self.state, event)
        self.stats.count(decision.kind, decision.disposition)
        return decision.output

    # --------------------------------------------------
    def _rebase(
        self,
        record: RawRecord,
        kind: RecordKind,
        spec: Optional[TagSpec],
        clock: ClockState,
    ) -> RawRecord:
        # clamped early clocks have no origin yet: they shift by the threshold
        shift = clock.origin_shift if clock.crossed else self.tracker.threshold

        if kind == RecordKind.CLOCK_UPDATE:
            if self.catalog.clock.mode == "delta":
                # deltas are already relative
                return record
            return self.rewriter.rebase(
                record,
                field_index=self.catalog.clock.field_index,
                radix=self.catalog.clock.radix,
                origin_shift=shift,
            )

        if spec is not None and spec.time_field is not None:
            return self.rewriter.rebase(
                record,
                field_index=spec.time_field,
                radix=spec.radix,
                origin_shift=shift,
            )
        return record

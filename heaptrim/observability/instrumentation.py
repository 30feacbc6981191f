#!filepath: heaptrim/observability/instrumentation.py
from __future__ import annotations

import time
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict

from heaptrim import logs
from heaptrim.observability.metrics import MetricRecorder
from heaptrim.observability.progress import ProgressReporter


@dataclass
class Instrumentation:
    """
    Observability bundle of one trim run.

    - timer(name): wall-time scope, recorded into ``timeline``
    - metrics: MetricRecorder
    - progress(task, interval): ProgressReporter factory

    Nothing here writes to stdout.
    """

    enabled: bool = True

    def __post_init__(self):
        self.metrics = MetricRecorder(enabled=self.enabled)
        self.timeline: Dict[str, float] = OrderedDict()

    # ---------------------------------------------------------
    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            start = time.perf_counter()
            try:
                yield
            finally:
                if record:
                    inst.timeline[name] = time.perf_counter() - start

        return _ctx()

    def progress(self, task: str, interval: int) -> ProgressReporter:
        return ProgressReporter(task, interval=interval, enabled=self.enabled)

    # ---------------------------------------------------------
    def report_timeline(self):
        if not self.enabled:
            return
        for name, sec in self.timeline.items():
            logs.info(f"[Timeline] {name:<20} {sec:>8.3f}s")


class NoOpInstrumentation:
    """Used when observability is disabled."""

    def __init__(self):
        self.metrics = MetricRecorder(enabled=False)
        self.timeline: Dict[str, float] = {}

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def progress(self, task: str, interval: int) -> ProgressReporter:
        return ProgressReporter(task, interval=interval, enabled=False)

    def report_timeline(self):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass

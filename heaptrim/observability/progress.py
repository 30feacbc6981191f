#!filepath: heaptrim/observability/progress.py
from time import perf_counter

from heaptrim import logs


class ProgressReporter:
    """
    Lightweight progress lines for long streams (no Rich/TQDM, stdout untouched).

    tick() is called once per record; a line is logged every ``interval``
    records. interval = 0 disables reporting.
    """

    def __init__(self, task: str, interval: int = 1_000_000, enabled: bool = True):
        self.task = task
        self.interval = interval
        self.enabled = enabled and interval > 0
        self.count = 0
        self._start = perf_counter()
        self.reports = 0

    def tick(self, bytes_read: int = 0):
        self.count += 1
        if not self.enabled or self.count % self.interval:
            return

        self.reports += 1
        elapsed = perf_counter() - self._start
        rate = self.count / elapsed if elapsed > 0 else 0.0
        logs.info(
            f"[Progress] {self.task}: {self.count:,} records "
            f"| {bytes_read / (1 << 20):,.1f} MiB read "
            f"| {rate:,.0f} rec/s"
        )

    def done(self):
        if not self.enabled:
            return
        elapsed = perf_counter() - self._start
        logs.info(f"[Progress] {self.task} done: {self.count:,} records in {elapsed:.2f}s")

#!filepath: heaptrim/trim/pipeline.py
from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Optional

from heaptrim import logs
from heaptrim.config.trim_config import TrimConfig
from heaptrim.observability.instrumentation import Instrumentation, NoOpInstrumentation
from heaptrim.utils.errors import FormatError, InputError, TrimError
from .catalog import TagCatalog, load_catalog
from .clock import ClockState
from .engine import TrimEngine
from .reader import RecordReader
from .settings import TrimSettings
from .stats import TrimStats
from .writer import RecordWriter


@dataclass
class TrimResult:
    clock: ClockState
    stats: TrimStats
    bytes_read: int
    bytes_written: int

    @property
    def crossed(self) -> bool:
        return self.clock.crossed


class TrimPipeline:
    """
    Reader -> TrimEngine -> Writer, one record at a time.

    Orchestration only:
      - owns the buffers, never the source / sink (stdio stays open)
      - on input-side errors the complete records already handed to the
        writer are flushed, then the error propagates
      - on output errors nothing more is written
    """

    def __init__(
        self,
        settings: TrimSettings,
        catalog: TagCatalog,
        inst: Instrumentation | NoOpInstrumentation | None = None,
    ):
        self.settings = settings
        self.catalog = catalog
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    # --------------------------------------------------
    def run(self, source: BinaryIO, sink: BinaryIO) -> TrimResult:
        engine = TrimEngine(self.settings, self.catalog)
        reader = RecordReader(source, self.settings.buffer_size)
        writer = RecordWriter(sink, self.settings.buffer_size)
        progress = self.inst.progress("trim", self.settings.progress_interval)

        logs.info(
            f"[Trim] start | threshold={self.settings.threshold} ticks "
            f"| preserve_time={self.settings.preserve_time} "
            f"| early_clock={self.settings.early_clock.value} "
            f"| compact_allocations={self.settings.compact_allocations} "
            f"| catalog={self.catalog.name} v{self.catalog.version}"
        )

        with self.inst.timer("trim"):
            try:
                for record in reader:
                    out = engine.process(record)
                    if out is not None:
                        writer.write(out)
                    progress.tick(reader.bytes_read)
            except (FormatError, InputError):
                writer.flush()
                raise
            writer.close()

        progress.done()

        result = TrimResult(
            clock=engine.state.clock,
            stats=engine.stats,
            bytes_read=reader.bytes_read,
            bytes_written=writer.bytes_written,
        )
        self._summarize(result)
        return result

    # --------------------------------------------------
    def _summarize(self, result: TrimResult) -> None:
        logs.info(f"[Trim] done. total time of profile was {result.clock.elapsed}")
        if not result.crossed:
            logs.warning(
                f"[Trim] threshold {self.settings.threshold} never reached, "
                f"every timed event was dropped"
            )

        self.inst.metrics.record("bytes_read", result.bytes_read)
        self.inst.metrics.record("bytes_written", result.bytes_written)
        self.inst.metrics.record_many(result.stats.as_metrics())
        self.inst.report_timeline()


@logs.catch("trim run aborted", log_time=True, expected=(TrimError,))
def run_trim(
    source: BinaryIO,
    sink: BinaryIO,
    config: TrimConfig,
    inst: Optional[Instrumentation] = None,
) -> TrimResult:
    """
    Convenience entry: TrimConfig -> catalog + settings -> pipeline run.
    """
    catalog = load_catalog(config.catalog)
    settings = TrimSettings.from_config(config, catalog)
    return TrimPipeline(settings, catalog, inst=inst).run(source, sink)

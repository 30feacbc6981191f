#!filepath: heaptrim/observability/metrics.py
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from heaptrim import logs


@dataclass
class MetricRecorder:
    """
    Run metrics, logged as ``[Metric] name = value`` when recorded.
    """

    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")

    def record_many(self, values: Mapping[str, Any], *, prefix: str = ""):
        for name, value in values.items():
            self.record(f"{prefix}{name}", value)

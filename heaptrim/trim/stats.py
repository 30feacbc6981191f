#!filepath: heaptrim/trim/stats.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict

from .policy import Disposition
from .record import RecordKind


@dataclass
class TrimStats:
    """
    Per-run counters: records seen per kind and what happened to them.
    """

    seen: Counter = field(default_factory=Counter)
    kept: Counter = field(default_factory=Counter)
    rewritten: Counter = field(default_factory=Counter)
    dropped: Counter = field(default_factory=Counter)

    def count(self, kind: RecordKind, disposition: Disposition) -> None:
        self.seen[kind] += 1
        if disposition == Disposition.DROP:
            self.dropped[kind] += 1
        elif disposition == Disposition.REWRITE:
            self.rewritten[kind] += 1
        else:
            self.kept[kind] += 1

    @property
    def records_in(self) -> int:
        return sum(self.seen.values())

    @property
    def records_out(self) -> int:
        return sum(self.kept.values()) + sum(self.rewritten.values())

    def as_metrics(self) -> Dict[str, int]:
        out: Dict[str, int] = {
            "records_in": self.records_in,
            "records_out": self.records_out,
        }
        for kind in RecordKind:
            out[f"{kind.value}.seen"] = self.seen[kind]
            out[f"{kind.value}.dropped"] = self.dropped[kind]
            out[f"{kind.value}.rewritten"] = self.rewritten[kind]
        return out

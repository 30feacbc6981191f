#!filepath: heaptrim/trim/record.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecordKind(str, Enum):
    """
    Closed set of record kinds. Every tag maps to exactly one of these;
    tags the catalog does not know fall back to OPAQUE.
    """

    DEFINITION = "definition"
    CLOCK_UPDATE = "clock_update"
    TIMED_EVENT = "timed_event"
    OPAQUE = "opaque"

    @property
    def always_retained(self) -> bool:
        return self in (RecordKind.DEFINITION, RecordKind.OPAQUE)


@dataclass(frozen=True, slots=True)
class RawRecord:
    """
    One line of the log, without its terminator.

    ``tag`` is the leading token (up to the first space); ``line`` is kept
    byte-exact so pass-through records are written back unchanged.
    """

    line: bytes

    @property
    def tag(self) -> bytes:
        sep = self.line.find(b" ")
        return self.line if sep < 0 else self.line[:sep]

    def field(self, index: int) -> bytes:
        """
        Space-separated token at ``index`` (the tag is index 0).
        Raises IndexError when the record is shorter.
        """
        parts = self.line.split(b" ", index + 1)
        return parts[index].rstrip(b"\r")

    def with_field(self, index: int, value: bytes) -> RawRecord:
        """Copy with one token replaced; every other byte is untouched."""
        parts = self.line.split(b" ", index + 1)
        old = parts[index]
        parts[index] = value + old[len(old.rstrip(b"\r")):]
        return RawRecord(b" ".join(parts))

    def __len__(self) -> int:
        return len(self.line)

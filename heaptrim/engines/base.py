#!filepath: heaptrim/engines/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Iterator, Optional, TypeVar


InEvent = TypeVar("InEvent")
OutEvent = TypeVar("OutEvent")


class BaseEngine(ABC, Generic[InEvent, OutEvent]):
    """
    Engine base class (atomic engine layer):

    - no I/O (no reading / writing of files or pipes)
    - pure "input event -> output event" logic
    - ``None`` from process() means the event is filtered out
    """

    @abstractmethod
    def process(self, event: InEvent) -> Optional[OutEvent]:
        """
        Handle a single event (smallest unit of work).
        """
        raise NotImplementedError

    def process_stream(self, events: Iterable[InEvent]) -> Iterator[OutEvent]:
        """
        Stream a sequence of events through process(), dropping filtered ones.
        """
        for ev in events:
            out = self.process(ev)
            if out is not None:
                yield out

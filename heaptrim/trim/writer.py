#!filepath: heaptrim/trim/writer.py
from __future__ import annotations

from typing import BinaryIO

from heaptrim.utils.errors import OutputError
from .record import RawRecord
from .reader import DEFAULT_BUFFER_SIZE


class RecordWriter:
    """
    Buffered record sink (incremental write).

    The buffer only ever holds whole records plus their terminator, so any
    flush ends on a record boundary.
    """

    def __init__(self, sink: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be > 0, got {buffer_size}")

        self._sink = sink
        self._buffer_size = buffer_size
        self._buf = bytearray()

        self.bytes_written = 0
        self.records_written = 0

    # --------------------------------------------------
    def write(self, record: RawRecord) -> None:
        self._buf += record.line
        self._buf += b"\n"
        self.records_written += 1

        if len(self._buf) >= self._buffer_size:
            self.flush()

    def flush(self) -> None:
        if self._buf:
            self._write_all(self._buf)
            self.bytes_written += len(self._buf)
            self._buf.clear()

        try:
            self._sink.flush()
        except OSError as e:
            raise OutputError(f"flush failed after {self.bytes_written} bytes: {e}") from e

    def close(self) -> None:
        """Flush; the sink itself is owned by the caller and stays open."""
        self.flush()

    @property
    def pending(self) -> int:
        return len(self._buf)

    # --------------------------------------------------
    def _write_all(self, data: bytearray) -> None:
        offset = 0
        total = len(data)
        try:
            with memoryview(data) as view:
                while offset < total:
                    with view[offset:] as chunk:
                        n = self._sink.write(chunk)
                    if n is None:
                        # non-blocking raw sink with a full pipe
                        raise OutputError("sink would block")
                    offset += n
        except OSError as e:
            raise OutputError(f"write failed after {self.bytes_written} bytes: {e}") from e

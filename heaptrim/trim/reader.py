#!filepath: heaptrim/trim/reader.py
from __future__ import annotations

from typing import BinaryIO, Iterator, Optional

from heaptrim.utils.errors import FormatError, InputError
from .record import RawRecord

DEFAULT_BUFFER_SIZE = 1 << 15


class RecordReader:
    """
    Binary stream -> RawRecord (one per ``\\n``-terminated line).

    - reads fixed-size chunks into a bytearray
    - a record cut by a chunk boundary stays in the buffer: consumed bytes
      are slid out, the next chunk is appended
    - the buffer holds at most one chunk plus the longest record
    """

    def __init__(self, source: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be > 0, got {buffer_size}")

        self._source = source
        self._buffer_size = buffer_size
        self._buf = bytearray()
        self._pos = 0    # start of the next record
        self._scan = 0   # no newline in buf[_pos:_scan]
        self._eof = False

        self.bytes_read = 0
        self.records_read = 0

    # --------------------------------------------------
    def __iter__(self) -> Iterator[RawRecord]:
        return self

    def __next__(self) -> RawRecord:
        record = self.next_record()
        if record is None:
            raise StopIteration
        return record

    def next_record(self) -> Optional[RawRecord]:
        """
        The next record, or None at a clean end of stream.
        """
        while True:
            nl = self._buf.find(b"\n", self._scan)
            if nl >= 0:
                line = bytes(self._buf[self._pos:nl])
                self._pos = self._scan = nl + 1
                self.records_read += 1
                return RawRecord(line)

            if self._eof:
                if self._pos < len(self._buf):
                    tail = bytes(self._buf[self._pos:self._pos + 64])
                    raise FormatError(
                        f"stream ended inside a record after {self.records_read} records: {tail!r}"
                    )
                return None

            self._refill()

    # --------------------------------------------------
    def _refill(self) -> None:
        if self._pos:
            del self._buf[:self._pos]
            self._pos = 0
        self._scan = len(self._buf)

        try:
            chunk = self._source.read(self._buffer_size)
        except OSError as e:
            raise InputError(f"read failed after {self.bytes_read} bytes: {e}") from e

        if not chunk:
            self._eof = True
            return

        self.bytes_read += len(chunk)
        self._buf += chunk

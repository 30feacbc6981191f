#!filepath: heaptrim/trim/rewriter.py
from __future__ import annotations

from heaptrim.utils.errors import FormatError
from .record import RawRecord

_FORMATS = {8: b"%o", 10: b"%d", 16: b"%x"}


def parse_int(token: bytes, radix: int = 16) -> int:
    """
    Non-negative integer token, e.g. b"7d0" -> 2000.
    """
    if not token or token[:1] in (b"-", b"+"):
        raise FormatError(f"expected a non-negative base-{radix} number, got {token!r}")
    try:
        return int(token, radix)
    except ValueError:
        raise FormatError(f"expected a base-{radix} number, got {token!r}") from None


def format_int(value: int, radix: int = 16) -> bytes:
    """
    Inverse of parse_int: lowercase, no prefix, no leading zeros.
    """
    return _FORMATS[radix] % value


def read_field(record: RawRecord, index: int, radix: int) -> int:
    try:
        token = record.field(index)
    except IndexError:
        raise FormatError(
            f"record {record.line[:64]!r} has no field {index}"
        ) from None
    return parse_int(token, radix)


class TimestampRewriter:
    """
    Re-bases one time field of a record: value -> max(0, value - origin_shift).

    A zero shift returns the record itself, so a run with threshold 0 is a
    byte-identical copy.
    """

    def rebase(
        self,
        record: RawRecord,
        *,
        field_index: int,
        radix: int,
        origin_shift: int,
    ) -> RawRecord:
        if origin_shift == 0:
            return record

        value = read_field(record, field_index, radix)
        shifted = max(0, value - origin_shift)
        return record.with_field(field_index, format_int(shifted, radix))

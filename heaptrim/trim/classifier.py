#!filepath: heaptrim/trim/classifier.py
from __future__ import annotations

from typing import Dict, Optional

from heaptrim.utils.errors import FormatError
from .catalog import TagCatalog, TagSpec
from .record import RawRecord, RecordKind


class RecordClassifier:
    """
    Input: RawRecord
    Output: RecordKind

    Looks at the leading tag only; the payload is never decoded here.
    Unknown tags are OPAQUE so newer format revisions stay safe.
    """

    def __init__(self, catalog: TagCatalog):
        self.catalog = catalog
        self._specs: Dict[bytes, TagSpec] = catalog.spec_table()

    # ----------------------------------------------
    def classify(self, record: RawRecord) -> RecordKind:
        tag = record.tag
        if not tag:
            raise FormatError(f"record without tag: {record.line[:64]!r}")

        spec = self._specs.get(tag)
        if spec is None:
            return RecordKind.OPAQUE
        return spec.kind

    def spec_for(self, record: RawRecord) -> Optional[TagSpec]:
        return self._specs.get(record.tag)

#!filepath: heaptrim/trim/__init__.py
from .record import RawRecord, RecordKind
from .catalog import TagCatalog, load_catalog
from .settings import TrimSettings
from .engine import TrimEngine
from .pipeline import TrimPipeline, TrimResult, run_trim

__all__ = [
    "RawRecord", "RecordKind",
    "TagCatalog", "load_catalog",
    "TrimSettings",
    "TrimEngine",
    "TrimPipeline", "TrimResult", "run_trim",
]

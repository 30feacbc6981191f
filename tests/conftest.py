# tests/conftest.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from loguru import logger

from heaptrim.trim.catalog import TagCatalog, load_catalog
from heaptrim.trim.pipeline import TrimPipeline, TrimResult
from heaptrim.trim.settings import TrimSettings


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield
    logger.remove()


@pytest.fixture(scope="session")
def heaptrack_catalog() -> TagCatalog:
    return load_catalog("heaptrack")


# ============================================================
# sample profiles
# ============================================================
DEFINITIONS = (
    b"v 10200 3\n"
    b"X ./app --flag\n"
    b"I 1000 3e8000\n"
    b"s 6d61696e\n"
    b"i 401000 1 0\n"
    b"t 1 0\n"
    b"a 10 1\n"
)


def tick_profile(ticks: int = 10) -> bytes:
    """
    Definitions, then for t in 0..ticks: ``c t`` followed by ``+ t``.
    Clock values are hex milliseconds like heaptrack writes them.
    """
    out = bytearray(DEFINITIONS)
    for t in range(ticks + 1):
        out += b"c %x\n+ %x\n" % (t, t)
    return bytes(out)


@pytest.fixture
def sample_profile() -> bytes:
    return tick_profile(10)


@pytest.fixture
def make_tick_profile() -> Callable[[int], bytes]:
    return tick_profile


@pytest.fixture
def definitions() -> bytes:
    return DEFINITIONS


@pytest.fixture
def run_trim_bytes(heaptrack_catalog) -> Callable[..., bytes]:
    """
    Factory fixture: bytes in -> trimmed bytes out.

    Usage:
        out = run_trim_bytes(data, threshold=5)
        out = run_trim_bytes(data, threshold=5, preserve_time=True)
    """

    def _run(data: bytes, threshold: int, catalog: TagCatalog | None = None, **kwargs) -> bytes:
        settings = TrimSettings(threshold=threshold, **kwargs)
        sink = io.BytesIO()
        TrimPipeline(settings, catalog or heaptrack_catalog).run(io.BytesIO(data), sink)
        return sink.getvalue()

    return _run


@pytest.fixture
def run_trim_result(heaptrack_catalog) -> Callable[..., TrimResult]:
    def _run(data: bytes, threshold: int, **kwargs) -> TrimResult:
        settings = TrimSettings(threshold=threshold, **kwargs)
        return TrimPipeline(settings, heaptrack_catalog).run(io.BytesIO(data), io.BytesIO())

    return _run


@pytest.fixture
def write_catalog(tmp_path: Path):
    """Write a catalog YAML under tmp_path and return its path."""

    def _write(text: str, name: str = "custom.yml") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write

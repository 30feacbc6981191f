#!filepath: heaptrim/trim/catalog.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from heaptrim import logs
from heaptrim.utils.errors import ConfigError
from .record import RecordKind

CATALOG_DIR = Path(__file__).resolve().parent.parent / "catalogs"

Radix = Literal[8, 10, 16]


class TagSpec(BaseModel):
    """
    How one leading tag is treated.

    time_field: index of a time value inside the record (tag = 0), rewritten
                on retention when timestamps are re-based
    """

    kind: RecordKind
    time_field: Optional[int] = Field(default=None, ge=1)
    radix: Radix = 16
    description: str = ""


class ClockSpec(BaseModel):
    tag: str
    field_index: int = Field(default=1, ge=1)
    radix: Radix = 16
    mode: Literal["absolute", "delta"] = "absolute"
    ticks_per_second: int = Field(default=1000, gt=0)


class AllocationIndexSpec(BaseModel):
    """
    Allocation-info definitions and the timed events that point at them by
    position (used by allocation compaction only).
    """

    definition_tag: str
    reference_tags: List[str]
    field_index: int = Field(default=1, ge=1)
    radix: Radix = 16


class TagCatalog(BaseModel):
    """
    Versioned tag -> kind table of one log format.
    """

    name: str
    version: int
    clock: ClockSpec
    tags: Dict[str, TagSpec]
    allocation_index: Optional[AllocationIndexSpec] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "TagCatalog":
        clock_tags = [t for t, spec in self.tags.items() if spec.kind == RecordKind.CLOCK_UPDATE]
        if clock_tags != [self.clock.tag]:
            raise ValueError(
                f"catalog {self.name!r}: exactly one clock_update tag expected "
                f"({self.clock.tag!r}), got {clock_tags}"
            )

        alloc = self.allocation_index
        if alloc is not None:
            defn = self.tags.get(alloc.definition_tag)
            if defn is None or defn.kind != RecordKind.DEFINITION:
                raise ValueError(
                    f"catalog {self.name!r}: {alloc.definition_tag!r} must be a definition tag"
                )
            for tag in alloc.reference_tags:
                ref = self.tags.get(tag)
                if ref is None or ref.kind != RecordKind.TIMED_EVENT:
                    raise ValueError(
                        f"catalog {self.name!r}: {tag!r} must be a timed_event tag"
                    )
        return self

    # ----------------------------------------------
    def spec_table(self) -> Dict[bytes, TagSpec]:
        """Byte-keyed lookup used on the hot path."""
        return {tag.encode("ascii"): spec for tag, spec in self.tags.items()}


# ============================================================
# loading
# ============================================================
def available_catalogs() -> List[str]:
    return sorted(p.stem for p in CATALOG_DIR.glob("*.yml"))


def resolve_catalog_path(name_or_path: str) -> Path:
    p = Path(name_or_path)
    if p.suffix in (".yml", ".yaml"):
        if not p.exists():
            raise ConfigError(f"Tag catalog not found: {p}")
        return p

    packaged = CATALOG_DIR / f"{name_or_path}.yml"
    if not packaged.exists():
        raise ConfigError(
            f"Unknown tag catalog {name_or_path!r}, available: {available_catalogs()}"
        )
    return packaged


def load_catalog(name_or_path: str = "heaptrack") -> TagCatalog:
    """
    Load a packaged catalog by name, or any catalog YAML by path.
    """
    path = resolve_catalog_path(name_or_path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Tag catalog is not valid YAML: {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Tag catalog must hold a mapping: {path}")

    try:
        catalog = TagCatalog(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid tag catalog {path}: {e}") from e

    logs.debug(f"[Catalog] loaded {catalog.name} v{catalog.version} ({len(catalog.tags)} tags)")
    return catalog

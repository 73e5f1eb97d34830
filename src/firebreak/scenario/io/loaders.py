"""Equipment catalogue and analysis request loaders (YAML/JSON documents, CSV tables)."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import pandas as pd
import yaml
from pydantic import ValidationError

from firebreak.core.errors import FirebreakValueError
from firebreak.scenario.contract.models import (
    EQUIPMENT_ADAPTER,
    Aircraft,
    AnalysisRequest,
    HandCrew,
    Machinery,
)

__all__ = [
    "DEFAULT_CATALOGUE_PATH",
    "CatalogueLoad",
    "load_analysis_request",
    "load_equipment_catalogue",
    "parse_equipment_entries",
    "read_csv",
]

logger = logging.getLogger(__name__)

DEFAULT_CATALOGUE_PATH = Path(__file__).resolve().parents[2] / "data/equipment_catalogue.yaml"

_DOCUMENT_SUFFIXES = {".yaml", ".yml", ".json"}


@dataclass(frozen=True)
class CatalogueLoad:
    """Parsed catalogue entries plus messages for entries that could not be parsed.

    Attributes
    ----------
    equipment:
        Equipment specs in file order.
    skipped:
        One message per malformed entry (index, name and the pydantic error summary).
    source:
        Path the catalogue was read from, if any.
    """

    equipment: tuple[Machinery | Aircraft | HandCrew, ...]
    skipped: tuple[str, ...] = ()
    source: str | None = None

    def active(self, include_inactive: bool = False) -> list[Machinery | Aircraft | HandCrew]:
        """Return the specs to analyse (inactive entries excluded unless requested)."""
        if include_inactive:
            return list(self.equipment)
        return [spec for spec in self.equipment if spec.active]


@dataclass
class _EntryCollector:
    equipment: list[Machinery | Aircraft | HandCrew] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def read_csv(path: Path, **kwargs: Any) -> pd.DataFrame:
    """Load a CSV file using pandas with UTF-8 defaults."""
    return pd.read_csv(path, encoding="utf-8", **kwargs)


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    if suffix not in _DOCUMENT_SUFFIXES:
        raise FirebreakValueError(
            f"Unsupported file type '{path.suffix}' for {path}; expected one of {sorted(_DOCUMENT_SUFFIXES)}"
        )
    with path.open("r", encoding="utf-8") as handle:
        if suffix == ".json":
            return json.load(handle)
        return yaml.safe_load(handle)


def _summarise_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def parse_equipment_entries(
    entries: Iterable[Mapping[str, Any]], *, source: str | None = None
) -> CatalogueLoad:
    """Parse raw catalogue mappings, skipping (and logging) entries that fail schema validation."""

    collected = _EntryCollector()
    for index, entry in enumerate(entries):
        try:
            spec = EQUIPMENT_ADAPTER.validate_python(entry)
        except ValidationError as exc:
            label = entry.get("name") if isinstance(entry, Mapping) else None
            message = f"entry {index} ({label or 'unnamed'}): {_summarise_validation_error(exc)}"
            logger.warning("Skipping equipment catalogue %s", message)
            collected.skipped.append(message)
            continue
        collected.equipment.append(spec)
    return CatalogueLoad(
        equipment=tuple(collected.equipment),
        skipped=tuple(collected.skipped),
        source=source,
    )


def _as_optional_cell(value: object) -> object | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if pd.isna(cast("Any", value)):
        return None
    return value


def _rows_from_csv(path: Path) -> list[dict[str, object]]:
    # Read as text so pydantic performs the numeric/bool coercion per field.
    df = read_csv(path, dtype=str)
    if "type" not in df.columns:
        raise FirebreakValueError(f"Equipment CSV {path} must include a 'type' column")
    rows: list[dict[str, object]] = []
    for raw in df.to_dict(orient="records"):
        row = {}
        for key, value in raw.items():
            cell = _as_optional_cell(value)
            if cell is not None:
                row[str(key)] = cell
        rows.append(row)
    return rows


def _entries_from_document(document: Any, path: Path) -> list[Any]:
    if isinstance(document, list):
        return document
    if isinstance(document, Mapping) and isinstance(document.get("equipment"), list):
        return document["equipment"]
    raise FirebreakValueError(
        f"Equipment catalogue {path} must be a list or a mapping with an 'equipment' list"
    )


def load_equipment_catalogue(path: str | Path | None = None) -> CatalogueLoad:
    """
    Load an equipment catalogue from YAML, JSON or CSV.

    Parameters
    ----------
    path:
        Catalogue file. ``None`` loads the bundled default catalogue.

    Returns
    -------
    CatalogueLoad
        Parsed specs and messages for skipped entries.

    Raises
    ------
    FileNotFoundError
        If the catalogue file does not exist.
    FirebreakValueError
        If the file type is unsupported or the document has no equipment list.
    """

    catalogue_path = Path(path) if path is not None else DEFAULT_CATALOGUE_PATH
    if not catalogue_path.exists():
        raise FileNotFoundError(f"Missing equipment catalogue: {catalogue_path}")
    if catalogue_path.suffix.lower() == ".csv":
        entries: list[Any] = _rows_from_csv(catalogue_path)
    else:
        entries = _entries_from_document(_read_document(catalogue_path), catalogue_path)
    load = parse_equipment_entries(entries, source=str(catalogue_path))
    logger.info(
        "Loaded %d equipment items from %s (%d skipped)",
        len(load.equipment),
        catalogue_path,
        len(load.skipped),
    )
    return load


def load_analysis_request(path: str | Path) -> tuple[AnalysisRequest, CatalogueLoad | None]:
    """
    Load an analysis request document (YAML/JSON).

    The document holds ``distance``, ``trackProfile``, ``vegetationProfile`` and optional
    ``parameters``. An optional inline ``equipment`` list is parsed as a catalogue and returned
    alongside the request.

    Raises
    ------
    pydantic.ValidationError
        If the request fields are missing or invalid (e.g. non-positive distance).
    """

    request_path = Path(path)
    if not request_path.exists():
        raise FileNotFoundError(request_path)
    document = _read_document(request_path)
    if not isinstance(document, Mapping):
        raise FirebreakValueError(f"Analysis request {request_path} must be a mapping")
    request = AnalysisRequest.model_validate(document)
    inline = document.get("equipment")
    if inline is None:
        return request, None
    if not isinstance(inline, list):
        raise FirebreakValueError(f"'equipment' in {request_path} must be a list")
    return request, parse_equipment_entries(inline, source=str(request_path))

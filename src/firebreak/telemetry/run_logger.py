"""Context manager capturing one JSONL telemetry record per analysis run."""

from __future__ import annotations

import json
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from firebreak.analysis.results import AnalysisResult
from firebreak.scenario.contract.models import AnalysisRequest


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def append_jsonl(path: str | Path, record: Mapping[str, Any]) -> None:
    """Append ``record`` as a single compact JSON line, creating parent folders as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        json.dump(record, handle, ensure_ascii=False, separators=(",", ":"), default=str)
        handle.write("\n")


def summarise_request(request: AnalysisRequest) -> dict[str, Any]:
    return {
        "distance": request.distance,
        "max_slope": request.track_profile.max_slope,
        "total_distance": request.track_profile.total_distance,
        "vegetation": request.vegetation_profile.predominant_vegetation.value,
        "has_slope_distribution": request.track_profile.slope_distribution is not None,
        "overrides": request.parameters.to_wire() if request.parameters else {},
    }


def summarise_result(result: AnalysisResult) -> dict[str, Any]:
    best = result.best()
    return {
        "equipment_count": result.equipment_count,
        "compatible_count": len(result.compatible()),
        "validation_error_count": len(result.validation_errors),
        "best_option_id": best.id if best else None,
        "best_option_hours": best.time if best else None,
        **result.environment.to_dict(),
    }


@dataclass(slots=True)
class AnalysisTelemetryLogger(AbstractContextManager["AnalysisTelemetryLogger"]):
    """Record high-level telemetry for an analysis run.

    Parameters
    ----------
    log_path:
        JSONL path where run records are appended.
    request:
        The analysis request (summarised, not stored verbatim).
    source:
        Entry point that triggered the run (``"cli"``, ``"api"``).
    context:
        Additional metadata (catalogue path, request file).
    """

    log_path: Path
    request: AnalysisRequest
    source: str = "cli"
    context: Mapping[str, Any] | None = None
    schema_version: str = "1.0"
    run_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    _start_time: float = field(default=0.0, init=False)
    _start_timestamp: str | None = field(default=None, init=False)
    _result: AnalysisResult | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    def __enter__(self) -> "AnalysisTelemetryLogger":
        self._start_time = time.perf_counter()
        self._start_timestamp = _iso_now()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type:
            self._close(status="error", error=repr(exc))
            return False
        self._close(status="ok", error=None)
        return False

    def record_result(self, result: AnalysisResult) -> None:
        """Attach the analysis outcome so the terminal record carries its metrics."""
        self._result = result

    def elapsed(self) -> float:
        return time.perf_counter() - self._start_time

    def _close(self, *, status: str, error: str | None) -> None:
        if self._closed:
            return
        duration = self.elapsed() if self._start_time else 0.0
        record = {
            "record_type": "analysis",
            "schema_version": self.schema_version,
            "run_id": self.run_id,
            "source": self.source,
            "status": status,
            "request": summarise_request(self.request),
            "metrics": summarise_result(self._result) if self._result else {},
            "context": dict(self.context or {}),
            "error": error,
            "started_at": self._start_timestamp,
            "finished_at": _iso_now(),
            "duration_seconds": round(duration, 3),
        }
        append_jsonl(self.log_path, record)
        self._closed = True


__all__ = ["AnalysisTelemetryLogger", "append_jsonl", "summarise_request", "summarise_result"]

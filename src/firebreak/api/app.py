"""FastAPI wrapper exposing the analysis engine over HTTP."""

from __future__ import annotations

import json
import logging
import math
from contextlib import nullcontext
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from firebreak import __version__
from firebreak.analysis import analyze_equipment
from firebreak.config import Settings, get_settings
from firebreak.core.errors import FirebreakValueError
from firebreak.logging_config import configure
from firebreak.scenario.contract import AnalysisRequest
from firebreak.scenario.io import CatalogueLoad, load_equipment_catalogue, parse_equipment_entries
from firebreak.telemetry import AnalysisTelemetryLogger

logger = logging.getLogger(__name__)


def _client_error(message: str, details: Any = None, status_code: int = 400) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _request_shape_error(payload: Any) -> str | None:
    """Return the first request-shape problem the engine must never see, if any."""
    if not isinstance(payload, dict):
        return "Request body must be a JSON object"
    distance = payload.get("distance")
    if isinstance(distance, bool) or not isinstance(distance, (int, float)):
        return "Distance must be a positive number"
    if not math.isfinite(distance) or distance <= 0:
        return "Distance must be a positive number"
    if not any(payload.get(key) for key in ("trackProfile", "trackAnalysis", "track_profile")):
        return "Track profile is required"
    if not any(
        payload.get(key) for key in ("vegetationProfile", "vegetationAnalysis", "vegetation_profile")
    ):
        return "Vegetation profile is required"
    return None


def _resolve_equipment(payload: dict[str, Any], settings: Settings) -> CatalogueLoad:
    inline = payload.get("equipment")
    if isinstance(inline, list):
        return parse_equipment_entries(inline, source="request")
    return load_equipment_catalogue(settings.equipment_catalogue)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure(settings.log_level)

    app = FastAPI(title="Firebreak API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/analysis/calculate")
    async def calculate(request: Request):
        """Rank catalogue (or inline) equipment for the posted route profile."""
        try:
            payload = json.loads(await request.body())
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Rejected analysis request with unparseable body")
            return _client_error("Invalid request body - must be valid JSON")

        problem = _request_shape_error(payload)
        if problem:
            return _client_error(problem)
        try:
            analysis_request = AnalysisRequest.model_validate(payload)
        except ValidationError as exc:
            return _client_error(
                "Invalid analysis request",
                details=[
                    {"loc": list(err["loc"]), "msg": err["msg"]}
                    for err in exc.errors(include_url=False)
                ],
            )
        if "equipment" in payload and not isinstance(payload["equipment"], list):
            return _client_error("Equipment must be a list")

        try:
            catalogue = _resolve_equipment(payload, settings)
            equipment = catalogue.active(settings.include_inactive)
            telemetry = (
                AnalysisTelemetryLogger(
                    settings.telemetry_log,
                    analysis_request,
                    source="api",
                    context={"catalogue": catalogue.source},
                )
                if settings.telemetry_log
                else nullcontext()
            )
            with telemetry as run:
                result = analyze_equipment(analysis_request, equipment)
                if run is not None:
                    run.record_result(result)
        except Exception as exc:
            logger.exception("Analysis calculation failed")
            return _client_error(
                "Failed to calculate equipment analysis", details=str(exc), status_code=500
            )
        body = result.to_dict()
        body["metadata"]["skipped"] = list(catalogue.skipped)
        return body

    @app.get("/api/equipment")
    async def list_equipment(include_inactive: bool = False):
        """Return the configured catalogue entries in wire format."""
        try:
            catalogue = load_equipment_catalogue(settings.equipment_catalogue)
        except (FileNotFoundError, FirebreakValueError) as exc:
            logger.error("Equipment catalogue unavailable: %s", exc)
            return _client_error(
                "Failed to load equipment catalogue", details=str(exc), status_code=500
            )
        return {
            "equipment": [spec.to_wire() for spec in catalogue.active(include_inactive)],
            "skipped": list(catalogue.skipped),
        }

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


__all__ = ["create_app"]

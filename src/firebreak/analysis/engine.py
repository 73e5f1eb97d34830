"""Equipment compatibility and time/cost analysis for a single fire break route."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from firebreak.analysis.compatibility import (
    evaluate_machinery_terrain,
    is_environment_compatible,
    is_slope_compatible,
)
from firebreak.analysis.environment import EffectiveEnvironment, resolve_environment
from firebreak.analysis.ranking import rank_results
from firebreak.analysis.results import AnalysisResult, CalculationResult
from firebreak.analysis.timing import (
    aircraft_sortie,
    apply_partial_penalty,
    hand_crew_hours,
    machinery_hours,
    operating_cost,
)
from firebreak.core.types import (
    DEFAULT_TERRAIN_FACTORS,
    DEFAULT_VEGETATION_FACTORS,
    CompatibilityLevel,
    TerrainLevel,
    VegetationClass,
)
from firebreak.scenario.contract.models import (
    Aircraft,
    AnalysisRequest,
    HandCrew,
    Machinery,
)
from firebreak.validation.equipment import validate_equipment

logger = logging.getLogger(__name__)

INVALID_CONFIGURATION_NOTE = "Equipment configuration invalid"
SLOPE_EXCEEDED_NOTE = "Slope exceeds capability"


def _invalid_result(spec: Machinery | Aircraft | HandCrew, errors: list[str]) -> CalculationResult:
    return CalculationResult(
        id=spec.id,
        name=spec.name,
        type=spec.equipment_type,
        time=0.0,
        cost=0.0,
        compatible=False,
        compatibility_level=CompatibilityLevel.INCOMPATIBLE,
        description=spec.description,
        note=INVALID_CONFIGURATION_NOTE,
        validation_errors=tuple(errors),
    )


def _evaluate_machinery(
    spec: Machinery, request: AnalysisRequest, env: EffectiveEnvironment
) -> CalculationResult:
    terrain_eval = evaluate_machinery_terrain(
        spec, request.track_profile, env.vegetation, env.terrain
    )
    slope_check = is_slope_compatible(spec, request.track_profile.max_slope)
    terrain_ok = terrain_eval.level in (CompatibilityLevel.FULL, CompatibilityLevel.PARTIAL)
    compatible = terrain_ok and slope_check.compatible

    hours = 0.0
    if compatible:
        hours = machinery_hours(request.distance, spec, env.terrain_factor, env.vegetation_factor)
        if terrain_eval.level is CompatibilityLevel.PARTIAL and terrain_eval.over_limit_percent:
            hours = apply_partial_penalty(hours, terrain_eval.over_limit_percent)

    level = terrain_eval.level if compatible else CompatibilityLevel.INCOMPATIBLE
    return CalculationResult(
        id=spec.id,
        name=spec.name,
        type=spec.equipment_type,
        time=hours,
        cost=operating_cost(hours, spec, compatible),
        compatible=compatible,
        compatibility_level=level,
        description=spec.description,
        slope_compatible=slope_check.compatible,
        max_slope_exceeded=slope_check.max_slope_exceeded,
        over_limit_percent=terrain_eval.over_limit_percent,
        note=terrain_eval.note if slope_check.compatible else SLOPE_EXCEEDED_NOTE,
    )


def _evaluate_aircraft(
    spec: Aircraft, request: AnalysisRequest, env: EffectiveEnvironment
) -> CalculationResult:
    compatible = is_environment_compatible(spec, env.terrain, env.vegetation)
    hours, drops = 0.0, 0
    if compatible:
        sortie = aircraft_sortie(request.distance, spec)
        hours, drops = sortie.hours, sortie.drops
    return CalculationResult(
        id=spec.id,
        name=spec.name,
        type=spec.equipment_type,
        time=hours,
        cost=operating_cost(hours, spec, compatible),
        compatible=compatible,
        compatibility_level=CompatibilityLevel.FULL if compatible else CompatibilityLevel.INCOMPATIBLE,
        description=spec.description,
        drops=drops,
    )


def _evaluate_hand_crew(
    spec: HandCrew, request: AnalysisRequest, env: EffectiveEnvironment
) -> CalculationResult:
    compatible = is_environment_compatible(spec, env.terrain, env.vegetation)
    hours = 0.0
    if compatible:
        hours = hand_crew_hours(request.distance, spec, env.terrain_factor, env.vegetation_factor)
    return CalculationResult(
        id=spec.id,
        name=spec.name,
        type=spec.equipment_type,
        time=hours,
        cost=operating_cost(hours, spec, compatible),
        compatible=compatible,
        compatibility_level=CompatibilityLevel.FULL if compatible else CompatibilityLevel.INCOMPATIBLE,
        description=spec.description,
    )


def evaluate_spec(
    spec: Machinery | Aircraft | HandCrew, request: AnalysisRequest, env: EffectiveEnvironment
) -> CalculationResult:
    """Evaluate one already-validated spec against the effective environment."""

    match spec:
        case Machinery():
            return _evaluate_machinery(spec, request, env)
        case Aircraft():
            return _evaluate_aircraft(spec, request, env)
        case HandCrew():
            return _evaluate_hand_crew(spec, request, env)
        case _:
            raise TypeError(f"Unsupported equipment model: {type(spec).__name__}")


def analyze_equipment(
    request: AnalysisRequest,
    equipment: Sequence[Machinery | Aircraft | HandCrew],
    *,
    default_terrain_factors: Mapping[TerrainLevel, float] = DEFAULT_TERRAIN_FACTORS,
    default_vegetation_factors: Mapping[VegetationClass, float] = DEFAULT_VEGETATION_FACTORS,
) -> AnalysisResult:
    """
    Rank every equipment spec by feasibility, completion time and cost for one route.

    Parameters
    ----------
    request:
        Route distance, sampled track/vegetation profiles and optional factor overrides.
    equipment:
        Specs to compare. Invalid specs produce an ``incompatible`` result carrying their
        validation errors; they never abort the batch.
    default_terrain_factors, default_vegetation_factors:
        Base multiplier tables onto which ``request.parameters`` overrides are merged.

    Returns
    -------
    AnalysisResult
        One calculation per input spec in rank order, plus the effective environment used.
    """

    env = resolve_environment(request, default_terrain_factors, default_vegetation_factors)
    logger.info(
        "Starting equipment analysis: distance=%.1fm maxSlope=%.1f vegetation=%s (terrain=%s)",
        request.distance,
        request.track_profile.max_slope,
        env.vegetation.value,
        env.terrain.value,
    )

    summaries: list[str] = []
    results: list[CalculationResult] = []
    for spec in equipment:
        errors = validate_equipment(spec)
        if errors:
            summary = f"{spec.name}: {', '.join(errors)}"
            logger.warning("Invalid equipment configuration %s", summary)
            summaries.append(summary)
            results.append(_invalid_result(spec, errors))
            continue
        results.append(evaluate_spec(spec, request, env))

    ranked = rank_results(results)
    logger.info(
        "Analysis completed: %d calculations, %d compatible, %d validation errors",
        len(ranked),
        sum(1 for calc in ranked if calc.compatible),
        len(summaries),
    )
    return AnalysisResult(
        calculations=tuple(ranked),
        timestamp=datetime.now(UTC).isoformat(),
        equipment_count=len(equipment),
        environment=env,
        validation_errors=tuple(summaries),
    )


__all__ = ["analyze_equipment", "evaluate_spec", "INVALID_CONFIGURATION_NOTE", "SLOPE_EXCEEDED_NOTE"]

"""Analysis engine: environment classification, compatibility, time/cost and ranking."""

from .compatibility import (
    PARTIAL_THRESHOLD,
    SlopeCheck,
    TerrainEvaluation,
    evaluate_machinery_terrain,
    is_environment_compatible,
    is_slope_compatible,
)
from .engine import analyze_equipment, evaluate_spec
from .environment import EffectiveEnvironment, derive_terrain_from_slope, resolve_environment
from .ranking import TIME_TIE_TOLERANCE_HOURS, rank_results
from .results import AnalysisResult, CalculationResult
from .timing import aircraft_sortie, apply_partial_penalty, hand_crew_hours, machinery_hours

__all__ = [
    "AnalysisResult",
    "CalculationResult",
    "EffectiveEnvironment",
    "PARTIAL_THRESHOLD",
    "SlopeCheck",
    "TIME_TIE_TOLERANCE_HOURS",
    "TerrainEvaluation",
    "aircraft_sortie",
    "analyze_equipment",
    "apply_partial_penalty",
    "derive_terrain_from_slope",
    "evaluate_machinery_terrain",
    "evaluate_spec",
    "hand_crew_hours",
    "is_environment_compatible",
    "is_slope_compatible",
    "machinery_hours",
    "rank_results",
    "resolve_environment",
]

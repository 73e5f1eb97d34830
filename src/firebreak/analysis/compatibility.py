"""Terrain, vegetation and slope compatibility rules for equipment specs."""

from __future__ import annotations

import math
from dataclasses import dataclass

from firebreak.core.types import (
    SLOPE_CATEGORY_TO_TERRAIN,
    CompatibilityLevel,
    TerrainLevel,
    VegetationClass,
)
from firebreak.scenario.contract.models import Aircraft, HandCrew, Machinery, TrackProfile

# Largest fraction of route above a machine's rated terrain that still counts as partial.
PARTIAL_THRESHOLD = 0.15


@dataclass(frozen=True)
class TerrainEvaluation:
    """
    Machinery terrain verdict.

    Attributes
    ----------
    level:
        ``full``, ``partial`` or ``incompatible``.
    over_limit_percent:
        Fraction (0-1) of the route whose terrain exceeds the machine's rating. ``None`` when the
        route breakdown was not consulted.
    note:
        Explanation surfaced to planners.
    """

    level: CompatibilityLevel
    over_limit_percent: float | None = None
    note: str | None = None


@dataclass(frozen=True)
class SlopeCheck:
    compatible: bool
    max_slope_exceeded: float | None = None


def is_environment_compatible(
    spec: Machinery | Aircraft | HandCrew,
    required_terrain: TerrainLevel,
    vegetation: VegetationClass,
) -> bool:
    """Coarse gate: terrain within the spec's hardest rating and vegetation explicitly allowed."""

    terrain_ok = required_terrain.rank <= spec.highest_terrain_rank
    return terrain_ok and vegetation in spec.allowed_vegetation


def is_slope_compatible(spec: Machinery, track_max_slope: float) -> SlopeCheck:
    if spec.max_slope is None:
        return SlopeCheck(compatible=True)
    if track_max_slope <= spec.max_slope:
        return SlopeCheck(compatible=True)
    return SlopeCheck(compatible=False, max_slope_exceeded=track_max_slope)


def over_limit_fraction(spec: Machinery | Aircraft | HandCrew, track: TrackProfile) -> float:
    """Fraction of ``track`` distance in slope buckets harder than the spec's rated terrain."""

    highest_allowed = spec.highest_terrain_rank
    over_distance = 0.0
    for category, metres in (track.slope_distribution or {}).items():
        terrain = SLOPE_CATEGORY_TO_TERRAIN.get(category)
        if terrain is None:
            continue
        if terrain.rank > highest_allowed:
            over_distance += metres
    if track.total_distance <= 0:
        return 0.0
    return over_distance / track.total_distance


def evaluate_machinery_terrain(
    spec: Machinery,
    track: TrackProfile | None,
    vegetation: VegetationClass,
    required_terrain: TerrainLevel,
) -> TerrainEvaluation:
    """Grade machinery terrain compatibility, allowing a partial tier for short difficult stretches."""

    if not is_environment_compatible(spec, required_terrain, vegetation):
        return TerrainEvaluation(CompatibilityLevel.INCOMPATIBLE, note="Terrain/vegetation not permitted")
    if track is None or track.slope_distribution is None:
        return TerrainEvaluation(CompatibilityLevel.FULL)

    over_percent = over_limit_fraction(spec, track)
    if over_percent == 0:
        return TerrainEvaluation(CompatibilityLevel.FULL)
    if over_percent <= PARTIAL_THRESHOLD:
        return TerrainEvaluation(
            CompatibilityLevel.PARTIAL,
            over_limit_percent=over_percent,
            note=f"~{math.floor(over_percent * 100 + 0.5)}% of route exceeds rated terrain; applying time penalty.",
        )
    return TerrainEvaluation(
        CompatibilityLevel.INCOMPATIBLE,
        over_limit_percent=over_percent,
        note="Too much difficult terrain",
    )


__all__ = [
    "PARTIAL_THRESHOLD",
    "TerrainEvaluation",
    "SlopeCheck",
    "is_environment_compatible",
    "is_slope_compatible",
    "over_limit_fraction",
    "evaluate_machinery_terrain",
]

"""Effective environment for an analysis: terrain level from slope plus resolved factors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from firebreak.core.types import (
    DEFAULT_TERRAIN_FACTORS,
    DEFAULT_VEGETATION_FACTORS,
    TerrainLevel,
    VegetationClass,
)
from firebreak.scenario.contract.models import AnalysisParameters, AnalysisRequest

# Exclusive upper bounds (degrees) for each terrain level; anything steeper is extreme.
_SLOPE_BREAKS: tuple[tuple[float, TerrainLevel], ...] = (
    (10.0, TerrainLevel.EASY),
    (20.0, TerrainLevel.MODERATE),
    (30.0, TerrainLevel.DIFFICULT),
)


def derive_terrain_from_slope(max_slope: float) -> TerrainLevel:
    """Classify a maximum slope (degrees) into a terrain level.

    Boundaries are exclusive: exactly 10° is ``moderate``, exactly 30° is ``extreme``.
    """

    for upper, level in _SLOPE_BREAKS:
        if max_slope < upper:
            return level
    return TerrainLevel.EXTREME


@dataclass(frozen=True)
class EffectiveEnvironment:
    """The single terrain/vegetation pair (and factors) every equipment item is judged against."""

    terrain: TerrainLevel
    vegetation: VegetationClass
    terrain_factor: float
    vegetation_factor: float

    def to_dict(self) -> dict[str, object]:
        return {
            "effectiveTerrain": self.terrain.value,
            "effectiveVegetation": self.vegetation.value,
            "terrainFactor": self.terrain_factor,
            "vegetationFactor": self.vegetation_factor,
        }


def resolve_environment(
    request: AnalysisRequest,
    default_terrain_factors: Mapping[TerrainLevel, float] = DEFAULT_TERRAIN_FACTORS,
    default_vegetation_factors: Mapping[VegetationClass, float] = DEFAULT_VEGETATION_FACTORS,
) -> EffectiveEnvironment:
    """Derive the effective terrain/vegetation and look up their multipliers."""

    parameters = request.parameters or AnalysisParameters()
    terrain_factors, vegetation_factors = parameters.resolve_factors(
        default_terrain_factors, default_vegetation_factors
    )
    terrain = derive_terrain_from_slope(request.track_profile.max_slope)
    vegetation = request.vegetation_profile.predominant_vegetation
    return EffectiveEnvironment(
        terrain=terrain,
        vegetation=vegetation,
        terrain_factor=terrain_factors[terrain],
        vegetation_factor=vegetation_factors[vegetation],
    )


__all__ = ["derive_terrain_from_slope", "EffectiveEnvironment", "resolve_environment"]

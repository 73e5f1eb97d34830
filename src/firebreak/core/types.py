"""Enumerations and lookup tables shared by the analysis engine."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType


class TerrainLevel(str, Enum):
    """Ordinal terrain difficulty (easy < moderate < difficult < extreme)."""

    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return TERRAIN_RANK[self]


class VegetationClass(str, Enum):
    """Fuel-density categories used by the vegetation factor table."""

    GRASSLAND = "grassland"
    LIGHTSHRUB = "lightshrub"
    MEDIUMSCRUB = "mediumscrub"
    HEAVYFOREST = "heavyforest"


class EquipmentType(str, Enum):
    MACHINERY = "Machinery"
    AIRCRAFT = "Aircraft"
    HAND_CREW = "HandCrew"


class CompatibilityLevel(str, Enum):
    """Outcome tier of a compatibility evaluation.

    ``PARTIAL`` is only produced for machinery (usable with a time penalty).
    """

    FULL = "full"
    PARTIAL = "partial"
    INCOMPATIBLE = "incompatible"


TERRAIN_RANK: Mapping[TerrainLevel, int] = MappingProxyType(
    {
        TerrainLevel.EASY: 0,
        TerrainLevel.MODERATE: 1,
        TerrainLevel.DIFFICULT: 2,
        TerrainLevel.EXTREME: 3,
    }
)

# Slope buckets emitted by the track sampler, keyed to the terrain level they represent.
SLOPE_CATEGORY_TO_TERRAIN: Mapping[str, TerrainLevel] = MappingProxyType(
    {
        "flat": TerrainLevel.EASY,
        "medium": TerrainLevel.MODERATE,
        "steep": TerrainLevel.DIFFICULT,
        "very_steep": TerrainLevel.EXTREME,
    }
)

DEFAULT_TERRAIN_FACTORS: Mapping[TerrainLevel, float] = MappingProxyType(
    {
        TerrainLevel.EASY: 1.0,
        TerrainLevel.MODERATE: 1.3,
        TerrainLevel.DIFFICULT: 1.7,
        TerrainLevel.EXTREME: 2.2,
    }
)

DEFAULT_VEGETATION_FACTORS: Mapping[VegetationClass, float] = MappingProxyType(
    {
        VegetationClass.GRASSLAND: 1.0,
        VegetationClass.LIGHTSHRUB: 1.1,
        VegetationClass.MEDIUMSCRUB: 1.5,
        VegetationClass.HEAVYFOREST: 2.0,
    }
)


def parse_terrain_level(value: object) -> TerrainLevel | None:
    """Return the terrain level for a level name or slope-bucket alias (``None`` if unknown)."""

    if isinstance(value, TerrainLevel):
        return value
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    try:
        return TerrainLevel(key)
    except ValueError:
        return SLOPE_CATEGORY_TO_TERRAIN.get(key)


def parse_vegetation_class(value: object) -> VegetationClass | None:
    if isinstance(value, VegetationClass):
        return value
    if not isinstance(value, str):
        return None
    try:
        return VegetationClass(value.strip().lower())
    except ValueError:
        return None


__all__ = [
    "TerrainLevel",
    "VegetationClass",
    "EquipmentType",
    "CompatibilityLevel",
    "TERRAIN_RANK",
    "SLOPE_CATEGORY_TO_TERRAIN",
    "DEFAULT_TERRAIN_FACTORS",
    "DEFAULT_VEGETATION_FACTORS",
    "parse_terrain_level",
    "parse_vegetation_class",
]

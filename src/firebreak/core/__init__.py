"""Core types and errors shared across firebreak modules."""

from .errors import FirebreakValueError
from .types import (
    DEFAULT_TERRAIN_FACTORS,
    DEFAULT_VEGETATION_FACTORS,
    SLOPE_CATEGORY_TO_TERRAIN,
    TERRAIN_RANK,
    CompatibilityLevel,
    EquipmentType,
    TerrainLevel,
    VegetationClass,
)

__all__ = [
    "FirebreakValueError",
    "TerrainLevel",
    "VegetationClass",
    "EquipmentType",
    "CompatibilityLevel",
    "TERRAIN_RANK",
    "SLOPE_CATEGORY_TO_TERRAIN",
    "DEFAULT_TERRAIN_FACTORS",
    "DEFAULT_VEGETATION_FACTORS",
]

"""Analysis contract models (Pydantic schemas, validators)."""

from .models import (
    EQUIPMENT_ADAPTER,
    Aircraft,
    AnalysisParameters,
    AnalysisRequest,
    EquipmentSpec,
    HandCrew,
    Machinery,
    TrackProfile,
    VegetationProfile,
)

__all__ = [
    "Machinery",
    "Aircraft",
    "HandCrew",
    "EquipmentSpec",
    "EQUIPMENT_ADAPTER",
    "TrackProfile",
    "VegetationProfile",
    "AnalysisParameters",
    "AnalysisRequest",
]

"""Pydantic models describing firebreak analysis inputs."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Annotated, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

from firebreak.core.types import (
    DEFAULT_TERRAIN_FACTORS,
    DEFAULT_VEGETATION_FACTORS,
    EquipmentType,
    TerrainLevel,
    VegetationClass,
    parse_terrain_level,
    parse_vegetation_class,
)


class _WireModel(BaseModel):
    """Accept camelCase wire names or snake_case field names; instances are immutable.

    Infinite and NaN floats are rejected on every model.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, allow_inf_nan=False
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _split_listing(value: object) -> list[object]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part for part in (p.strip() for p in re.split(r"[|,]", value)) if part]
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    raise ValueError(f"Expected a list or comma-separated string (got {type(value).__name__})")


def _unique(values):
    seen = []
    for value in values:
        if value is not None and value not in seen:
            seen.append(value)
    return tuple(seen)


class _EquipmentBase(_WireModel):
    """Fields shared by every equipment variant.

    Attributes
    ----------
    id, name:
        Catalogue identifier and display name. Blank values are reported by the
        validator rather than rejected here.
    allowed_terrain:
        Terrain levels the equipment is rated for. Slope-bucket spellings
        (``flat``/``medium``/``steep``/``very_steep``) are normalised; unknown entries are dropped.
    allowed_vegetation:
        Vegetation classes the equipment can clear. Unknown entries are dropped.
    clearing_rate:
        Metres of break per hour (machinery).
    cost_per_hour:
        Hourly operating cost; ``None`` means the equipment is costed at zero.
    active:
        Inactive catalogue entries are skipped unless a caller opts in.
    """

    id: str = ""
    name: str = ""
    allowed_terrain: tuple[TerrainLevel, ...] = ()
    allowed_vegetation: tuple[VegetationClass, ...] = ()
    clearing_rate: float | None = None
    cost_per_hour: float | None = None
    description: str | None = None
    active: bool = True

    @field_validator("allowed_terrain", mode="before")
    @classmethod
    def _normalise_terrain(cls, value: object) -> tuple[TerrainLevel, ...]:
        return _unique(parse_terrain_level(item) for item in _split_listing(value))

    @field_validator("allowed_vegetation", mode="before")
    @classmethod
    def _normalise_vegetation(cls, value: object) -> tuple[VegetationClass, ...]:
        return _unique(parse_vegetation_class(item) for item in _split_listing(value))

    @property
    def equipment_type(self) -> EquipmentType:
        return EquipmentType(self.type)  # type: ignore[attr-defined]

    @property
    def highest_terrain_rank(self) -> int:
        """Rank of the most difficult terrain the equipment is rated for (-1 if none)."""
        return max((level.rank for level in self.allowed_terrain), default=-1)


class Machinery(_EquipmentBase):
    """Continuous ground clearing equipment (dozers, graders).

    ``max_slope`` is an optional ceiling in degrees; absence means unconstrained.
    """

    type: Literal["Machinery"] = "Machinery"
    max_slope: float | None = None
    cut_width_meters: float | None = None


class Aircraft(_EquipmentBase):
    """Retardant drop aircraft; work is counted in discrete drops."""

    type: Literal["Aircraft"] = "Aircraft"
    drop_length: float | None = None
    turnaround_minutes: float | None = None
    capacity_litres: float | None = None
    cost_per_drop: float | None = None


class HandCrew(_EquipmentBase):
    type: Literal["HandCrew"] = "HandCrew"
    crew_size: int | None = None
    clearing_rate_per_person: float | None = None
    equipment_list: tuple[str, ...] = ()

    @field_validator("equipment_list", mode="before")
    @classmethod
    def _split_equipment_list(cls, value: object) -> tuple[str, ...]:
        return tuple(str(item) for item in _split_listing(value))


EquipmentSpec = Annotated[Union[Machinery, Aircraft, HandCrew], Field(discriminator="type")]
EQUIPMENT_ADAPTER: TypeAdapter[Machinery | Aircraft | HandCrew] = TypeAdapter(EquipmentSpec)


class TrackProfile(_WireModel):
    """Aggregate slope profile of the drawn route.

    Attributes
    ----------
    total_distance:
        Route length in metres.
    max_slope:
        Steepest sampled slope in degrees.
    slope_distribution:
        Metres of route per slope bucket (``flat``, ``medium``, ``steep``, ``very_steep``).
        ``None`` when the sampler produced no breakdown.
    """

    total_distance: float = Field(default=0.0, ge=0)
    max_slope: float = 0.0
    slope_distribution: dict[str, float] | None = None

    @field_validator("slope_distribution")
    @classmethod
    def _non_negative_buckets(cls, value: dict[str, float] | None) -> dict[str, float] | None:
        if value is not None and any(metres < 0 for metres in value.values()):
            raise ValueError("slopeDistribution values must be non-negative")
        return value


class VegetationProfile(_WireModel):
    predominant_vegetation: VegetationClass
    coverage: dict[VegetationClass, float] | None = None


class AnalysisParameters(_WireModel):
    """Per-key overrides for the terrain and vegetation multiplier tables."""

    terrain_factors: dict[TerrainLevel, float] | None = None
    vegetation_factors: dict[VegetationClass, float] | None = None

    @field_validator("terrain_factors", "vegetation_factors")
    @classmethod
    def _positive_factors(cls, value: dict | None) -> dict | None:
        if value is not None and any(factor <= 0 for factor in value.values()):
            raise ValueError("Analysis factors must be positive")
        return value

    def resolve_factors(
        self,
        default_terrain: Mapping[TerrainLevel, float] = DEFAULT_TERRAIN_FACTORS,
        default_vegetation: Mapping[VegetationClass, float] = DEFAULT_VEGETATION_FACTORS,
    ) -> tuple[dict[TerrainLevel, float], dict[VegetationClass, float]]:
        """Merge the overrides onto the supplied default tables, key by key."""

        terrain = {**default_terrain, **(self.terrain_factors or {})}
        vegetation = {**default_vegetation, **(self.vegetation_factors or {})}
        return terrain, vegetation


class AnalysisRequest(_WireModel):
    """A single analysis call: route length plus the externally sampled profiles."""

    distance: float
    track_profile: TrackProfile = Field(
        validation_alias=AliasChoices("trackProfile", "trackAnalysis", "track_profile")
    )
    vegetation_profile: VegetationProfile = Field(
        validation_alias=AliasChoices("vegetationProfile", "vegetationAnalysis", "vegetation_profile")
    )
    parameters: AnalysisParameters | None = None

    @field_validator("distance")
    @classmethod
    def _distance_positive(cls, value: float) -> float:
        if not value > 0:
            raise ValueError("Distance must be a positive number")
        return value


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

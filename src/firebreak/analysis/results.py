"""Immutable result records returned by the analysis engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from firebreak.analysis.environment import EffectiveEnvironment
from firebreak.core.types import CompatibilityLevel, EquipmentType


@dataclass(frozen=True)
class CalculationResult:
    """
    Per-equipment outcome of an analysis.

    Attributes
    ----------
    time:
        Estimated completion time in hours (``0`` when incompatible or invalid).
    cost:
        ``time * costPerHour`` for compatible equipment, else ``0``.
    slope_compatible, max_slope_exceeded, over_limit_percent:
        Machinery-only diagnostics.
    drops:
        Aircraft-only drop count.
    validation_errors:
        Non-empty only when the spec failed configuration checks.
    """

    id: str
    name: str
    type: EquipmentType
    time: float
    cost: float
    compatible: bool
    compatibility_level: CompatibilityLevel
    unit: str = "hours"
    description: str | None = None
    slope_compatible: bool | None = None
    max_slope_exceeded: float | None = None
    drops: int | None = None
    over_limit_percent: float | None = None
    note: str | None = None
    validation_errors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "time": self.time,
            "cost": self.cost,
            "compatible": self.compatible,
            "compatibilityLevel": self.compatibility_level.value,
            "unit": self.unit,
        }
        optional = {
            "description": self.description,
            "slopeCompatible": self.slope_compatible,
            "maxSlopeExceeded": self.max_slope_exceeded,
            "drops": self.drops,
            "overLimitPercent": self.over_limit_percent,
            "note": self.note,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        if self.validation_errors:
            payload["validationErrors"] = list(self.validation_errors)
        return payload


@dataclass(frozen=True)
class AnalysisResult:
    """Ranked calculations plus the metadata describing how they were produced."""

    calculations: tuple[CalculationResult, ...]
    timestamp: str
    equipment_count: int
    environment: EffectiveEnvironment
    validation_errors: tuple[str, ...] = field(default=())

    def compatible(self) -> list[CalculationResult]:
        """Compatible calculations in rank order."""
        return [calc for calc in self.calculations if calc.compatible]

    def best(self) -> CalculationResult | None:
        options = self.compatible()
        return options[0] if options else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "calculations": [calc.to_dict() for calc in self.calculations],
            "metadata": {
                "timestamp": self.timestamp,
                "equipmentCount": self.equipment_count,
                "validationErrors": list(self.validation_errors),
                "analysisParameters": self.environment.to_dict(),
            },
        }

    def to_dataframe(self) -> pd.DataFrame:
        """One row per calculation, in rank order, for CSV export."""
        columns = [
            "rank",
            "id",
            "name",
            "type",
            "compatible",
            "compatibility_level",
            "time_hours",
            "cost",
            "drops",
            "over_limit_percent",
            "note",
        ]
        rows = [
            {
                "rank": index,
                "id": calc.id,
                "name": calc.name,
                "type": calc.type.value,
                "compatible": calc.compatible,
                "compatibility_level": calc.compatibility_level.value,
                "time_hours": calc.time,
                "cost": calc.cost,
                "drops": calc.drops,
                "over_limit_percent": calc.over_limit_percent,
                "note": "; ".join(calc.validation_errors) or calc.note,
            }
            for index, calc in enumerate(self.calculations, start=1)
        ]
        return pd.DataFrame(rows, columns=columns)


__all__ = ["CalculationResult", "AnalysisResult"]

"""CLI helper utilities for firebreak."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

import typer

from firebreak.core.types import (
    TerrainLevel,
    VegetationClass,
    parse_terrain_level,
    parse_vegetation_class,
)

_Key = TypeVar("_Key", TerrainLevel, VegetationClass)


def _parse_factor_overrides(
    factor_args: Sequence[str] | None,
    parse_key: Callable[[object], _Key | None],
    allowed: Sequence[str],
    label: str,
) -> dict[_Key, float]:
    overrides: dict[_Key, float] = {}
    if not factor_args:
        return overrides
    for arg in factor_args:
        if "=" not in arg:
            raise typer.BadParameter(f"{label} factor must be in name=value format (got '{arg}')")
        raw_name, raw_value = arg.split("=", 1)
        key = parse_key(raw_name)
        if key is None:
            raise typer.BadParameter(
                f"Unknown {label.lower()} '{raw_name.strip()}'. Allowed keys: {', '.join(allowed)}."
            )
        try:
            value = float(raw_value)
        except ValueError as exc:
            raise typer.BadParameter(
                f"{label} factor for '{raw_name.strip()}' must be numeric (got '{raw_value}')"
            ) from exc
        if value <= 0:
            raise typer.BadParameter(f"{label} factor for '{raw_name.strip()}' must be positive")
        overrides[key] = value
    return overrides


def parse_terrain_factors(factor_args: Sequence[str] | None) -> dict[TerrainLevel, float]:
    """Parse ``level=value`` terrain factor overrides (slope-bucket names accepted)."""
    return _parse_factor_overrides(
        factor_args, parse_terrain_level, [level.value for level in TerrainLevel], "Terrain"
    )


def parse_vegetation_factors(factor_args: Sequence[str] | None) -> dict[VegetationClass, float]:
    """Parse ``class=value`` vegetation factor overrides."""
    return _parse_factor_overrides(
        factor_args,
        parse_vegetation_class,
        [veg.value for veg in VegetationClass],
        "Vegetation",
    )


def format_hours(hours: float) -> str:
    if hours <= 0:
        return "-"
    if hours < 1:
        return f"{hours * 60:.0f} min"
    return f"{hours:.1f} h"


def format_cost(cost: float) -> str:
    return f"${cost:,.0f}" if cost > 0 else "-"


__all__ = ["parse_terrain_factors", "parse_vegetation_factors", "format_hours", "format_cost"]

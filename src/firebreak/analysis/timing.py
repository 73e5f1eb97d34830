"""Type-specific completion-time and cost formulas."""

from __future__ import annotations

import math
from dataclasses import dataclass

from firebreak.scenario.contract.models import Aircraft, HandCrew, Machinery

DEFAULT_DROP_LENGTH_M = 100.0
DEFAULT_TURNAROUND_MINUTES = 15.0

# Each unit of over-limit fraction adds twice its value to machinery time.
PARTIAL_PENALTY_WEIGHT = 2.0


@dataclass(frozen=True)
class AircraftSortie:
    """Drop count and elapsed hours for an aircraft laying a line of given length."""

    drops: int
    hours: float


def machinery_hours(
    distance: float, spec: Machinery, terrain_factor: float, vegetation_factor: float
) -> float:
    """
    Hours for a machine to clear ``distance`` metres.

    Parameters
    ----------
    distance:
        Route length in metres.
    spec:
        Machinery spec; ``clearing_rate`` is metres/hour on easy grassland.
    terrain_factor, vegetation_factor:
        Multipliers that slow the nominal clearing rate.

    Returns
    -------
    float
        Elapsed hours, or ``0.0`` when the clearing rate is missing or non-positive.
    """

    clearing_rate = spec.clearing_rate or 0.0
    if clearing_rate <= 0:
        return 0.0
    adjusted_rate = clearing_rate / (terrain_factor * vegetation_factor)
    return distance / adjusted_rate


def apply_partial_penalty(hours: float, over_limit_percent: float) -> float:
    """Stretch machinery hours linearly with the fraction of route above its rating."""
    return hours * (1 + over_limit_percent * PARTIAL_PENALTY_WEIGHT)


def aircraft_sortie(distance: float, spec: Aircraft) -> AircraftSortie:
    """Drops needed to cover ``distance`` and the turnaround hours they take.

    Missing drop length / turnaround fall back to 100 m and 15 minutes.
    """

    drop_length = spec.drop_length or DEFAULT_DROP_LENGTH_M
    turnaround_minutes = spec.turnaround_minutes or DEFAULT_TURNAROUND_MINUTES
    drops = math.ceil(distance / drop_length)
    return AircraftSortie(drops=drops, hours=drops * (turnaround_minutes / 60.0))


def hand_crew_hours(
    distance: float, spec: HandCrew, terrain_factor: float, vegetation_factor: float
) -> float:
    crew_size = spec.crew_size or 0
    rate_per_person = spec.clearing_rate_per_person or 0.0
    if crew_size <= 0 or rate_per_person <= 0:
        return 0.0
    total_rate = crew_size * rate_per_person
    adjusted_rate = total_rate / (terrain_factor * vegetation_factor)
    return distance / adjusted_rate


def operating_cost(hours: float, spec: Machinery | Aircraft | HandCrew, compatible: bool) -> float:
    """Hourly cost applied to elapsed time; zero when incompatible or uncosted."""
    if not compatible or not spec.cost_per_hour:
        return 0.0
    return hours * spec.cost_per_hour


__all__ = [
    "DEFAULT_DROP_LENGTH_M",
    "DEFAULT_TURNAROUND_MINUTES",
    "PARTIAL_PENALTY_WEIGHT",
    "AircraftSortie",
    "machinery_hours",
    "apply_partial_penalty",
    "aircraft_sortie",
    "hand_crew_hours",
    "operating_cost",
]

"""Configuration checks applied to each equipment spec before analysis."""

from __future__ import annotations

from firebreak.scenario.contract.models import Aircraft, HandCrew, Machinery


def _positive(value: float | None) -> bool:
    return value is not None and value > 0


def validate_equipment(spec: Machinery | Aircraft | HandCrew) -> list[str]:
    """Return human-readable configuration errors for ``spec`` (empty when valid)."""

    errors: list[str] = []
    if not spec.id.strip():
        errors.append("Equipment ID is required")
    if not spec.name.strip():
        errors.append("Equipment name is required")
    if not spec.allowed_terrain:
        errors.append("Equipment must specify allowed terrain types")
    if not spec.allowed_vegetation:
        errors.append("Equipment must specify allowed vegetation types")

    if isinstance(spec, Machinery):
        if not _positive(spec.clearing_rate):
            errors.append("Machinery must have positive clearing rate")
    elif isinstance(spec, Aircraft):
        if not _positive(spec.drop_length):
            errors.append("Aircraft must have positive drop length")
        if not _positive(spec.turnaround_minutes):
            errors.append("Aircraft must have positive turnaround time")
    elif isinstance(spec, HandCrew):
        if not _positive(spec.crew_size):
            errors.append("Hand crew must have positive crew size")
        if not _positive(spec.clearing_rate_per_person):
            errors.append("Hand crew must have positive clearing rate per person")
    return errors


__all__ = ["validate_equipment"]

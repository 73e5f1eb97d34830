"""Deterministic ordering of calculation results."""

from __future__ import annotations

from collections.abc import Iterable
from functools import cmp_to_key

from firebreak.analysis.results import CalculationResult

# Times closer than this (hours) are treated as tied and ordered by cost.
TIME_TIE_TOLERANCE_HOURS = 0.1


def _compare(a: CalculationResult, b: CalculationResult) -> float:
    if a.compatible != b.compatible:
        return -1 if a.compatible else 1
    if not a.compatible:
        return 0
    if abs(a.time - b.time) < TIME_TIE_TOLERANCE_HOURS:
        return a.cost - b.cost
    return a.time - b.time


def rank_results(results: Iterable[CalculationResult]) -> list[CalculationResult]:
    """Compatible results first (fastest, near-ties cheapest first); incompatible keep input order."""
    return sorted(results, key=cmp_to_key(_compare))


__all__ = ["TIME_TIE_TOLERANCE_HOURS", "rank_results"]

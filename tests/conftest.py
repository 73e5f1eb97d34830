from __future__ import annotations

import pytest

from firebreak.scenario.contract import (
    Aircraft,
    AnalysisRequest,
    HandCrew,
    Machinery,
    TrackProfile,
    VegetationProfile,
)


def make_request(
    *,
    distance: float = 1000.0,
    max_slope: float = 15.0,
    vegetation: str = "grassland",
    slope_distribution: dict[str, float] | None = None,
    total_distance: float | None = None,
    parameters: dict | None = None,
) -> AnalysisRequest:
    return AnalysisRequest.model_validate(
        {
            "distance": distance,
            "trackProfile": {
                "totalDistance": distance if total_distance is None else total_distance,
                "maxSlope": max_slope,
                "slopeDistribution": slope_distribution,
            },
            "vegetationProfile": {"predominantVegetation": vegetation},
            "parameters": parameters,
        }
    )


@pytest.fixture
def request_factory():
    return make_request


@pytest.fixture
def dozer() -> Machinery:
    return Machinery(
        id="dozer-1",
        name="Test Dozer",
        clearing_rate=100.0,
        cost_per_hour=50.0,
        allowed_terrain=["easy", "moderate"],
        allowed_vegetation=["grassland"],
    )


@pytest.fixture
def tanker() -> Aircraft:
    return Aircraft(
        id="tanker-1",
        name="Test Tanker",
        drop_length=300.0,
        turnaround_minutes=12.0,
        cost_per_hour=1000.0,
        allowed_terrain=["easy", "moderate", "difficult", "extreme"],
        allowed_vegetation=["grassland", "lightshrub"],
    )


@pytest.fixture
def crew() -> HandCrew:
    return HandCrew(
        id="crew-1",
        name="Test Crew",
        crew_size=5,
        clearing_rate_per_person=20.0,
        cost_per_hour=200.0,
        allowed_terrain=["easy", "moderate", "difficult"],
        allowed_vegetation=["grassland", "mediumscrub"],
    )


@pytest.fixture
def track_1000() -> TrackProfile:
    return TrackProfile(total_distance=1000.0, max_slope=25.0)


@pytest.fixture
def grassland() -> VegetationProfile:
    return VegetationProfile(predominant_vegetation="grassland")

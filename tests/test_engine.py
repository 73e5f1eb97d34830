import logging

import pytest

from firebreak.analysis import analyze_equipment, evaluate_spec, resolve_environment
from firebreak.analysis.engine import INVALID_CONFIGURATION_NOTE, SLOPE_EXCEEDED_NOTE
from firebreak.core.types import CompatibilityLevel, EquipmentType, TerrainLevel
from firebreak.scenario.contract import Machinery


def test_machinery_end_to_end(request_factory, dozer):
    result = analyze_equipment(request_factory(max_slope=15), [dozer])

    assert result.equipment_count == 1
    assert result.validation_errors == ()
    calc = result.calculations[0]
    assert calc.compatible
    assert calc.compatibility_level is CompatibilityLevel.FULL
    assert calc.time == pytest.approx(13.0)
    assert calc.cost == pytest.approx(650.0)
    assert calc.slope_compatible is True
    assert calc.unit == "hours"
    assert result.to_dict()["metadata"]["analysisParameters"] == {
        "effectiveTerrain": "moderate",
        "effectiveVegetation": "grassland",
        "terrainFactor": 1.3,
        "vegetationFactor": 1.0,
    }


def test_partial_machinery_gets_time_penalty(request_factory):
    spec = Machinery(
        id="d6",
        name="D6",
        clearing_rate=100,
        cost_per_hour=10,
        allowed_terrain=["easy", "moderate", "difficult"],
        allowed_vegetation=["grassland"],
    )
    request = request_factory(max_slope=25, slope_distribution={"flat": 850, "very_steep": 150})
    calc = analyze_equipment(request, [spec]).calculations[0]

    assert calc.compatible
    assert calc.compatibility_level is CompatibilityLevel.PARTIAL
    assert calc.time == pytest.approx(22.1)
    assert calc.cost == pytest.approx(221.0)
    assert calc.over_limit_percent == pytest.approx(0.15)
    assert calc.note.startswith("~15%")


def test_too_much_over_limit_is_incompatible(request_factory):
    spec = Machinery(
        id="d6",
        name="D6",
        clearing_rate=100,
        cost_per_hour=10,
        allowed_terrain=["easy", "moderate", "difficult"],
        allowed_vegetation=["grassland"],
    )
    request = request_factory(max_slope=25, slope_distribution={"flat": 800, "very_steep": 200})
    calc = analyze_equipment(request, [spec]).calculations[0]

    assert not calc.compatible
    assert calc.compatibility_level is CompatibilityLevel.INCOMPATIBLE
    assert calc.time == 0.0
    assert calc.cost == 0.0
    assert calc.note == "Too much difficult terrain"


def test_slope_ceiling_makes_machinery_incompatible(request_factory, dozer):
    limited = dozer.model_copy(update={"max_slope": 15.0})
    calc = analyze_equipment(request_factory(max_slope=18), [limited]).calculations[0]

    assert not calc.compatible
    assert calc.compatibility_level is CompatibilityLevel.INCOMPATIBLE
    assert calc.slope_compatible is False
    assert calc.max_slope_exceeded == 18
    assert calc.note == SLOPE_EXCEEDED_NOTE
    assert calc.time == 0.0


def test_aircraft_counts_drops(request_factory, tanker):
    calc = analyze_equipment(request_factory(distance=950, max_slope=35), [tanker]).calculations[0]
    assert calc.type is EquipmentType.AIRCRAFT
    assert calc.compatible
    assert calc.drops == 4
    assert calc.time == pytest.approx(0.8)
    assert calc.cost == pytest.approx(800.0)


def test_incompatible_aircraft_reports_zero_drops(request_factory, tanker):
    request = request_factory(distance=950, vegetation="heavyforest")
    calc = analyze_equipment(request, [tanker]).calculations[0]
    assert not calc.compatible
    assert calc.drops == 0
    assert calc.time == 0.0


def test_hand_crew_has_no_partial_tier(request_factory, crew):
    # Crew is rated up to difficult; very steep buckets do not matter, only the coarse gate.
    request = request_factory(max_slope=15, slope_distribution={"flat": 500, "very_steep": 500})
    calc = analyze_equipment(request, [crew]).calculations[0]
    assert calc.compatibility_level is CompatibilityLevel.FULL
    assert calc.time == pytest.approx(13.0)
    assert calc.cost == pytest.approx(2600.0)
    assert calc.over_limit_percent is None


def test_invalid_spec_is_isolated(request_factory, dozer, caplog):
    broken = Machinery(id="bad", name="Broken", allowed_terrain=["easy"], allowed_vegetation=["grassland"])
    with caplog.at_level(logging.WARNING, logger="firebreak.analysis.engine"):
        result = analyze_equipment(request_factory(), [broken, dozer])

    assert [calc.id for calc in result.calculations] == ["dozer-1", "bad"]
    invalid = result.calculations[1]
    assert invalid.note == INVALID_CONFIGURATION_NOTE
    assert invalid.validation_errors == ("Machinery must have positive clearing rate",)
    assert invalid.to_dict()["validationErrors"] == ["Machinery must have positive clearing rate"]
    assert result.validation_errors == ("Broken: Machinery must have positive clearing rate",)
    assert "Broken" in caplog.text


def test_results_rank_by_time_then_cost(request_factory, dozer, tanker, crew):
    result = analyze_equipment(request_factory(distance=950, max_slope=5), [crew, dozer, tanker])
    assert [calc.id for calc in result.calculations] == ["tanker-1", "dozer-1", "crew-1"]
    assert result.best().id == "tanker-1"
    assert len(result.compatible()) == 3


def test_request_parameters_override_defaults(request_factory, dozer):
    request = request_factory(max_slope=15, parameters={"terrainFactors": {"moderate": 2.0}})
    result = analyze_equipment(request, [dozer])
    assert result.calculations[0].time == pytest.approx(20.0)
    assert result.environment.terrain_factor == 2.0


def test_custom_default_tables(request_factory, dozer):
    tables = {level: 1.0 for level in TerrainLevel}
    result = analyze_equipment(request_factory(max_slope=15), [dozer], default_terrain_factors=tables)
    assert result.calculations[0].time == pytest.approx(10.0)


def test_empty_equipment_list(request_factory):
    result = analyze_equipment(request_factory(), [])
    assert result.calculations == ()
    assert result.best() is None
    assert result.to_dict()["metadata"]["equipmentCount"] == 0


def test_evaluate_spec_rejects_unknown_models(request_factory):
    request = request_factory()
    with pytest.raises(TypeError):
        evaluate_spec(object(), request, resolve_environment(request))  # type: ignore[arg-type]


def test_dataframe_export_in_rank_order(request_factory, dozer, tanker):
    frame = analyze_equipment(request_factory(distance=950, max_slope=5), [dozer, tanker]).to_dataframe()
    assert list(frame["rank"]) == [1, 2]
    assert list(frame["id"]) == ["tanker-1", "dozer-1"]
    assert frame.loc[0, "drops"] == 4

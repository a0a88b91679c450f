import pytest
from builder.catalog import ElementType
from builder.models import (
    CityMetrics, EnvironmentalIndicators, PlacedElement, clamp_position
)


def test_clamp_position():
    """Verify positions stay 5% away from the surface edges."""
    assert clamp_position(0) == 5.0
    assert clamp_position(-20) == 5.0
    assert clamp_position(50) == 50.0
    assert clamp_position(99.9) == 95.0


def test_placed_element_to_dict():
    el = PlacedElement(id="tree-1", type=ElementType.TREE, x=10.0, y=20.0)
    assert el.to_dict() == {"id": "tree-1", "type": "tree", "x": 10.0, "y": 20.0}


def test_placed_element_is_immutable():
    el = PlacedElement(id="tree-1", type=ElementType.TREE, x=10.0, y=20.0)
    with pytest.raises(AttributeError):
        el.x = 30.0


def test_neutral_indicators():
    indicators = EnvironmentalIndicators.neutral()
    assert indicators.values() == (50.0, 50.0, 50.0, 50.0, 50.0)


def test_indicators_as_dict():
    indicators = EnvironmentalIndicators(
        air_quality=1, temperature=2, vegetation=3, energy=4, atmosphere=5
    )
    assert indicators.as_dict() == {
        "airQuality": 1, "temperature": 2, "vegetation": 3, "energy": 4, "atmosphere": 5,
    }


def test_city_metrics_round_trip_keys():
    """The JSON body carries exactly the keys the prediction service expects."""
    metrics = CityMetrics(
        concrete_coverage=0.1, vegetation_coverage=0.2, water_coverage=0.1,
        building_density=0.1, industrial_buildings=0.0, tree_coverage=0.25,
        solar_panel_coverage=0.0, wind_turbine_density=0.0,
        residential_buildings=0.1, traffic_density=0.03,
        latitude=30.0444, longitude=31.2357, hour_of_day=9,
    )
    d = metrics.to_dict()
    assert set(d) == set(CityMetrics.RATIO_FIELDS) | {"latitude", "longitude", "hour_of_day"}
    assert CityMetrics.from_dict(d) == metrics
    assert set(metrics.ratios()) == set(CityMetrics.RATIO_FIELDS)

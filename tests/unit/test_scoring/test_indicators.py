"""Tests for score normalization, the local fallback and the overall label."""

import math
import random
from dataclasses import replace

import pytest
from builder.catalog import ElementType
from builder.models import EnvironmentalIndicators, PlacedElement
from scoring.indicators import (
    calculate_local_indicators, classify_overall, indicator_level,
    normalize_prediction, overall_score, sanitize_score
)
from scoring.metrics import derive_city_metrics


def make_elements(*types):
    return [
        PlacedElement(id=f"{t.value}-{i}", type=t, x=50.0, y=50.0)
        for i, t in enumerate(types)
    ]


def metrics_with_vegetation(coverage):
    metrics = derive_city_metrics([], hour=12)
    return replace(metrics, vegetation_coverage=coverage)


def assert_bounded(indicators):
    for value in indicators.values():
        assert math.isfinite(value)
        assert 0.0 <= value <= 100.0


class TestSanitizeScore:
    """Tests for clamping and NaN handling."""

    def test_in_range(self):
        assert sanitize_score(42.5) == 42.5

    def test_clamped(self):
        assert sanitize_score(-3) == 0.0
        assert sanitize_score(180) == 100.0

    def test_non_finite(self):
        assert sanitize_score(float("nan")) == 50.0
        assert sanitize_score(float("inf")) == 50.0
        assert sanitize_score(float("-inf")) == 50.0

    def test_non_numeric(self):
        assert sanitize_score(None) == 50.0
        assert sanitize_score("abc") == 50.0


class TestNormalizePrediction:
    """Tests for mapping remote predictions to indicators."""

    def test_reference_response(self):
        prediction = {
            "air_quality": {"aqi": 50},
            "scores": {"air_quality": 80},
            "temperature": {"uhi_intensity": 1},
            "energy": {"sustainability": 60},
        }
        indicators = normalize_prediction(prediction, metrics_with_vegetation(0.3))
        assert indicators.air_quality == pytest.approx(66.5)
        assert indicators.atmosphere == 80
        assert indicators.temperature == 90
        assert indicators.vegetation == pytest.approx(30)
        assert indicators.energy == 60

    def test_newer_field_names_take_priority(self):
        prediction = {
            "air_quality": {"air_quality_index": 100, "aqi": 0},
            "scores": {"air_quality_score": 70, "air_quality": 10},
            "energy": {"sustainability_score": 90, "sustainability": 10},
        }
        indicators = normalize_prediction(prediction, metrics_with_vegetation(0))
        assert indicators.air_quality == pytest.approx(33.0)
        assert indicators.atmosphere == 70
        assert indicators.energy == 90

    def test_missing_fields_default(self):
        indicators = normalize_prediction({}, metrics_with_vegetation(0.4))
        assert indicators.air_quality == pytest.approx(66.5)
        assert indicators.atmosphere == 50
        assert indicators.temperature == 100
        assert indicators.energy == 50
        assert indicators.vegetation == pytest.approx(40)

    def test_null_and_non_object_sections(self):
        prediction = {
            "air_quality": None,
            "scores": [1, 2, 3],
            "temperature": "hot",
            "energy": {"sustainability_score": None, "sustainability": 75},
        }
        indicators = normalize_prediction(prediction, metrics_with_vegetation(0))
        assert indicators.air_quality == pytest.approx(66.5)
        assert indicators.atmosphere == 50
        assert indicators.temperature == 100
        assert indicators.energy == 75

    def test_body_that_is_not_an_object(self):
        indicators = normalize_prediction(["unexpected"], metrics_with_vegetation(0))
        assert_bounded(indicators)
        assert indicators.energy == 50

    def test_zero_aqi_is_a_real_reading(self):
        indicators = normalize_prediction({"air_quality": {"aqi": 0}}, metrics_with_vegetation(0))
        assert indicators.air_quality == 100

    def test_out_of_range_values_are_clamped(self):
        prediction = {
            "air_quality": {"aqi": 400},
            "scores": {"air_quality": 250},
            "temperature": {"uhi_intensity": -5},
            "energy": {"sustainability": -20},
        }
        indicators = normalize_prediction(prediction, metrics_with_vegetation(0))
        assert indicators.air_quality == 0
        assert indicators.atmosphere == 100
        assert indicators.temperature == 100
        assert indicators.energy == 0

    def test_nan_and_infinity_become_neutral(self):
        prediction = {
            "air_quality": {"aqi": float("nan")},
            "scores": {"air_quality": float("inf")},
            "temperature": {"uhi_intensity": float("-inf")},
            "energy": {"sustainability": "NaN"},
        }
        indicators = normalize_prediction(prediction, metrics_with_vegetation(0))
        assert indicators.values() == (50.0, 50.0, 50.0, 50.0, 50.0)

    def test_numeric_strings_are_accepted(self):
        indicators = normalize_prediction(
            {"energy": {"sustainability": "64.5"}}, metrics_with_vegetation(0)
        )
        assert indicators.energy == 64.5


class TestLocalIndicators:
    """Tests for the additive fallback model."""

    def test_empty_city_is_neutral(self):
        indicators = calculate_local_indicators([])
        assert indicators == EnvironmentalIndicators.neutral()
        assert classify_overall(indicators) == "Good"

    def test_single_factory(self):
        indicators = calculate_local_indicators(make_elements(ElementType.FACTORY))
        assert indicators.as_dict() == {
            "airQuality": 42, "temperature": 53, "vegetation": 48, "energy": 42, "atmosphere": 45,
        }
        assert overall_score(indicators) == 46
        assert classify_overall(indicators) == "Fair"

    def test_order_independent(self):
        elements = make_elements(ElementType.TREE, ElementType.WASTE, ElementType.SOLAR)
        assert calculate_local_indicators(elements) == calculate_local_indicators(elements[::-1])

    def test_clamped_to_bounds(self):
        indicators = calculate_local_indicators(make_elements(*[ElementType.TREE] * 20))
        assert indicators.vegetation == 100
        assert indicators.temperature == 10
        polluted = calculate_local_indicators(make_elements(*[ElementType.WASTE] * 20))
        assert polluted.air_quality == 0

    def test_adding_a_tree_raises_vegetation(self):
        elements = make_elements(ElementType.HOUSE, ElementType.TREE)
        before = calculate_local_indicators(elements).vegetation
        after = calculate_local_indicators(elements + make_elements(ElementType.TREE)).vegetation
        assert after == before + 8

    def test_random_cities_stay_in_bounds(self):
        rng = random.Random(7)
        types = list(ElementType)
        for _ in range(50):
            elements = make_elements(*[rng.choice(types) for _ in range(rng.randint(0, 60))])
            assert_bounded(calculate_local_indicators(elements))


class TestClassification:
    """Tests for the overall label and indicator levels."""

    @pytest.mark.parametrize("value,label", [
        (100, "Excellent"),
        (70, "Excellent"),
        (69.9, "Good"),
        (50, "Good"),
        (30, "Fair"),
        (29.9, "Poor"),
        (0, "Poor"),
    ])
    def test_thresholds(self, value, label):
        indicators = EnvironmentalIndicators(value, value, value, value, value)
        assert classify_overall(indicators) == label

    def test_non_finite_values_are_ignored(self):
        indicators = EnvironmentalIndicators(
            air_quality=float("nan"), temperature=80, vegetation=float("inf"),
            energy=80, atmosphere=80,
        )
        assert overall_score(indicators) == 80
        assert classify_overall(indicators) == "Excellent"

    def test_all_invalid_falls_back_to_neutral(self):
        nan = float("nan")
        indicators = EnvironmentalIndicators(nan, nan, nan, nan, nan)
        assert overall_score(indicators) == 50
        assert classify_overall(indicators) == "Good"

    def test_indicator_levels(self):
        assert indicator_level(70) == "high"
        assert indicator_level(69.5) == "high"
        assert indicator_level(69.4) == "medium"
        assert indicator_level(40) == "medium"
        assert indicator_level(39) == "low"
        assert indicator_level(float("nan")) == "low"

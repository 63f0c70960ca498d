"""
Unit tests for the Soil-Chemistry Recommender
"""

import pytest
from unittest.mock import patch

from agronomy.models import InvalidInput, Level, SoilReading
from agronomy.recommenders.soil import (
    SOIL_RULES,
    SoilLevels,
    SoilRule,
    _tomato,
    apply_rules,
    classify,
    classify_soil,
    recommend_by_soil,
)


class TestClassification:
    """Threshold classification of raw readings."""

    @pytest.mark.parametrize("value,expected", [
        (0, Level.LOW),
        (29.9, Level.LOW),
        (30, Level.MEDIUM),
        (59.9, Level.MEDIUM),
        (60, Level.HIGH),
        (250, Level.HIGH),
    ])
    def test_nitrogen_thresholds(self, value, expected):
        assert classify(value, (30, 60)) is expected

    def test_classify_soil_uses_per_nutrient_thresholds(self):
        reading = SoilReading(nitrogen=45, phosphorus=14, potassium=40, rainfall=150, humidity=69)
        levels = classify_soil(reading)

        assert levels.nitrogen is Level.MEDIUM
        assert levels.phosphorus is Level.LOW
        assert levels.potassium is Level.HIGH
        assert levels.moisture is Level.HIGH
        assert levels.humidity is Level.MEDIUM


class TestSoilRules:
    """Rule firing and ordering."""

    @patch('agronomy.recommenders.soil.logger')
    def test_high_n_medium_p_low_k_dry(self, mock_logger):
        """N=High, P=Medium, K=Low, moisture=Low, humidity=Low gives five records."""
        result = recommend_by_soil(80, 20, 10, 30, 30)

        crops = [r.crop for r in result]
        assert crops == ["Rice", "Wheat", "Chili", "Tomato", "Onion"]

    @patch('agronomy.recommenders.soil.logger')
    def test_everything_high(self, mock_logger):
        result = recommend_by_soil(100, 50, 60, 300, 90)

        crops = [r.crop for r in result]
        assert crops == ["Rice", "Sugarcane", "Wheat", "Potato", "Tomato", "Onion"]

    @patch('agronomy.recommenders.soil.logger')
    def test_balanced_medium_npk_adds_maize(self, mock_logger):
        result = recommend_by_soil(45, 20, 30, 100, 50)

        crops = [r.crop for r in result]
        assert "Maize" in crops
        assert "Chili" not in crops
        assert "Rice" not in crops

    @patch('agronomy.recommenders.soil.logger')
    def test_baseline_crops_always_present(self, mock_logger):
        result = recommend_by_soil(0, 0, 0, 0, 0)

        crops = [r.crop for r in result]
        assert crops == ["Chili", "Tomato", "Onion"]

    @patch('agronomy.recommenders.soil.logger')
    def test_sorted_by_score_descending(self, mock_logger):
        result = recommend_by_soil(100, 50, 60, 300, 90)

        scores = [r.suitability_score for r in result]
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_duplicates_are_kept(self):
        rules = (
            SoilRule("first", lambda lv: True, _tomato),
            SoilRule("second", lambda lv: True, _tomato),
        )
        levels = SoilLevels(Level.LOW, Level.LOW, Level.LOW, Level.LOW, Level.LOW)

        result = apply_rules(levels, rules)

        assert [r.crop for r in result] == ["Tomato", "Tomato"]

    def test_rule_order_is_fixed(self):
        assert [rule.name for rule in SOIL_RULES] == [
            "high_nitrogen",
            "adequate_phosphorus",
            "high_potassium",
            "wet_and_humid",
            "balanced_npk",
            "nutrient_deficit",
            "baseline_tomato",
            "baseline_onion",
        ]

    @patch('agronomy.recommenders.soil.logger')
    def test_records_are_fresh_per_call(self, mock_logger):
        first = recommend_by_soil(80, 20, 10, 30, 30)
        second = recommend_by_soil(80, 20, 10, 30, 30)

        assert first == second
        assert first[0] is not second[0]

    @patch('agronomy.recommenders.soil.logger')
    def test_accepts_reading_and_numeric_strings(self, mock_logger):
        from_strings = recommend_by_soil("80", "20", "10", "30", " 30 ")
        from_reading = recommend_by_soil(SoilReading(80, 20, 10, 30, 30))

        assert [r.crop for r in from_strings] == [r.crop for r in from_reading]


class TestSoilValidation:
    """Malformed readings are rejected before any rule runs."""

    @pytest.mark.parametrize("position,field", [
        (0, "N"), (1, "P"), (2, "K"), (3, "rainfall"), (4, "humidity"),
    ])
    @pytest.mark.parametrize("bad_value", ["", "   ", None, "abc"])
    def test_blank_or_non_numeric_field(self, position, field, bad_value):
        values = [80, 20, 10, 30, 30]
        values[position] = bad_value

        with pytest.raises(InvalidInput) as exc:
            recommend_by_soil(*values)

        assert exc.value.fields == [field]

    def test_negative_value_rejected(self):
        with pytest.raises(InvalidInput):
            recommend_by_soil(80, -1, 10, 30, 30)

    @patch('agronomy.recommenders.soil.apply_rules')
    def test_no_partial_computation(self, mock_apply):
        with pytest.raises(InvalidInput):
            recommend_by_soil(None, None, 10, 30, 30)

        mock_apply.assert_not_called()

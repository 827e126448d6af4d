"""
Unit tests for the summary aggregation helpers.

Tests cover:
- Distribution keys (lowercasing, unknown bucket, zero counts)
- Averages formatted as fixed-point strings or rounded integers
- Ratios with an empty denominator
- Health score bucketing
"""

import pytest

from models.model_enum import RiskLevel
from services.aggregation import (
    format_average,
    health_bucket,
    health_distribution,
    mean,
    round_average,
    safe_ratio,
    to_distribution,
)


class TestToDistribution:
    """Tests for to_distribution()."""

    def test_keys_are_lowercased(self):
        assert to_distribution([("HIGH", 2), ("LOW", 5)]) == {"high": 2, "low": 5}

    def test_case_preserved_when_requested(self):
        rows = [("Dell", 3), ("HP", 1)]
        assert to_distribution(rows, lowercase=False) == {"Dell": 3, "HP": 1}

    def test_null_value_becomes_unknown(self):
        assert to_distribution([(None, 4), ("RETAIL", 1)], lowercase=False) == {
            "unknown": 4,
            "RETAIL": 1,
        }

    def test_zero_counts_are_omitted(self):
        assert to_distribution([("MEDIUM", 0), ("HIGH", 1)]) == {"high": 1}

    def test_enum_members_use_their_value(self):
        assert to_distribution([(RiskLevel.MEDIUM, 2)]) == {"medium": 2}

    def test_colliding_keys_are_summed(self):
        assert to_distribution([("Dell", 1), ("DELL", 2)]) == {"dell": 3}

    def test_empty_rows(self):
        assert to_distribution([]) == {}


class TestAverages:
    """Tests for format_average(), round_average() and mean()."""

    def test_format_average_one_decimal(self):
        assert format_average(64.333) == "64.3"

    def test_format_average_none_is_zero_string(self):
        assert format_average(None) == "0"

    def test_format_average_custom_digits(self):
        assert format_average(2, digits=2) == "2.00"

    @pytest.mark.parametrize(
        "value,expected",
        [(72.5, 73), (72.49, 72), (23.0, 23), (None, 0)],
    )
    def test_round_average_half_up(self, value, expected):
        assert round_average(value) == expected

    def test_mean_skips_nulls(self):
        assert mean([10, None, 20]) == 15

    def test_mean_of_nothing_is_none(self):
        assert mean([None, None]) is None
        assert mean([]) is None


class TestSafeRatio:
    """Tests for safe_ratio()."""

    def test_ratio(self):
        assert safe_ratio(173, 2) == "86.5"

    def test_zero_denominator(self):
        assert safe_ratio(10, 0) == "0"

    def test_missing_numerator_counts_as_zero(self):
        assert safe_ratio(None, 4) == "0.0"


class TestHealthBuckets:
    """Tests for health_bucket() and health_distribution()."""

    @pytest.mark.parametrize(
        "score,bucket",
        [(100, "excellent"), (90, "excellent"), (89, "good"), (70, "good"),
         (69, "fair"), (50, "fair"), (49, "poor"), (0, "poor")],
    )
    def test_bucket_boundaries(self, score, bucket):
        assert health_bucket(score) == bucket

    def test_every_bucket_present(self):
        assert health_distribution([23, 92]) == {
            "excellent": 1,
            "good": 0,
            "fair": 0,
            "poor": 1,
        }

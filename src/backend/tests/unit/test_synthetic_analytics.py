"""
Unit tests for generated trend and prediction series.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from models.model_enum import PredictionHorizon, PredictionType, TimeRange, TrendMetric
from services.analytics_service import AnalyticsService


def _parse(timestamp: str) -> datetime:
    assert timestamp.endswith("Z")
    return datetime.fromisoformat(timestamp[:-1])


class TestTrends:
    """Tests for AnalyticsService.get_trends()."""

    @pytest.mark.parametrize(
        "time_range,points,step",
        [
            (TimeRange.LAST_24_HOURS, 24, timedelta(hours=1)),
            (TimeRange.LAST_7_DAYS, 7, timedelta(days=1)),
            (TimeRange.LAST_30_DAYS, 30, timedelta(days=1)),
            (TimeRange.LAST_90_DAYS, 30, timedelta(days=1)),
        ],
    )
    def test_point_count_and_spacing(self, time_range, points, step):
        series = AnalyticsService.get_trends(TrendMetric.DEVICES, time_range)
        assert len(series) == points

        stamps = [_parse(point["timestamp"]) for point in series]
        assert stamps == sorted(stamps)
        assert stamps[1] - stamps[0] == step

    def test_device_points(self):
        point = AnalyticsService.get_trends(TrendMetric.DEVICES, TimeRange.LAST_7_DAYS)[0]
        assert 950 <= point["online"] <= 999
        assert 5 <= point["offline"] <= 24
        assert 80 <= float(point["avgHealthScore"]) <= 100

    def test_ticket_points(self):
        point = AnalyticsService.get_trends(TrendMetric.TICKETS, TimeRange.LAST_7_DAYS)[0]
        assert set(point) == {"timestamp", "created", "resolved", "avgResolutionTime"}

    def test_performance_points(self):
        point = AnalyticsService.get_trends(TrendMetric.PERFORMANCE, TimeRange.LAST_24_HOURS)[0]
        assert 99.5 <= float(point["uptime"]) <= 100
        assert len(point["uptime"].split(".")[1]) == 2


class TestPredictions:
    """Tests for AnalyticsService.get_predictions()."""

    @pytest.mark.parametrize(
        "horizon,days",
        [
            (PredictionHorizon.ONE_DAY, 1),
            (PredictionHorizon.SEVEN_DAYS, 7),
            (PredictionHorizon.THIRTY_DAYS, 30),
        ],
    )
    def test_one_entry_per_day_starting_tomorrow(self, horizon, days):
        series = AnalyticsService.get_predictions(PredictionType.DEVICE_FAILURE, horizon)
        assert len(series) == days

        dates = [date.fromisoformat(entry["date"]) for entry in series]
        assert dates[0] > datetime.now(timezone.utc).date() - timedelta(days=1)
        assert all(b - a == timedelta(days=1) for a, b in zip(dates, dates[1:]))

    def test_ticket_volume_breakdown(self):
        entry = AnalyticsService.get_predictions(
            PredictionType.TICKET_VOLUME, PredictionHorizon.ONE_DAY
        )[0]
        assert set(entry["priority"]) == {"high", "medium", "low"}
        assert 10 <= entry["expectedTickets"] <= 29

    def test_maintenance_fields(self):
        entry = AnalyticsService.get_predictions(
            PredictionType.MAINTENANCE, PredictionHorizon.ONE_DAY
        )[0]
        assert 1000 <= entry["costSavings"] <= 5999
        assert 0.9 <= float(entry["confidence"]) <= 1.0

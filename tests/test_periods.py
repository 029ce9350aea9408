from datetime import date
from types import SimpleNamespace

import pytest

from appraisal_hub.models.review_period import PeriodType
from appraisal_hub.services.period_service import (
    current_half,
    current_quarter,
    days_remaining,
    generate_period_name,
    is_period_active,
    period_dates,
)


@pytest.mark.parametrize("month,expected", [(1, PeriodType.Q1), (3, PeriodType.Q1), (4, PeriodType.Q2), (9, PeriodType.Q3), (12, PeriodType.Q4)])
def test_current_quarter(month, expected):
    assert current_quarter(date(2025, month, 15)) == expected


def test_current_half():
    assert current_half(date(2025, 6, 30)) == PeriodType.H1
    assert current_half(date(2025, 7, 1)) == PeriodType.H2


def test_period_dates():
    assert period_dates(PeriodType.Q1, 2024) == (date(2024, 1, 1), date(2024, 3, 31))
    assert period_dates(PeriodType.H2, 2025) == (date(2025, 7, 1), date(2025, 12, 31))
    assert period_dates(PeriodType.ANNUAL, 2025) == (date(2025, 1, 1), date(2025, 12, 31))
    assert period_dates(PeriodType.CUSTOM, 2025) is None


def test_period_names():
    assert generate_period_name(PeriodType.Q3, 2025) == "Q3 2025"
    assert generate_period_name(PeriodType.ANNUAL, 2025) == "Annual 2025"
    assert generate_period_name(PeriodType.CUSTOM, 2025) == "Custom 2025"


def test_days_remaining():
    assert days_remaining(date(2025, 3, 31), today=date(2025, 3, 21)) == 10


def test_is_period_active_needs_status_and_date_range():
    period = SimpleNamespace(status="active", start_date=date(2025, 1, 1), end_date=date(2025, 3, 31))
    assert is_period_active(period, today=date(2025, 2, 1))
    assert not is_period_active(period, today=date(2025, 4, 1))
    period.status = "planning"
    assert not is_period_active(period, today=date(2025, 2, 1))


def test_suggestion_endpoint(client):
    data = client.get("/api/periods/suggestion").json()
    today = date.today()
    assert data["year"] == today.year
    assert data["type"] == current_quarter(today).value
    assert data["name"] == f"{data['type']} {today.year}"

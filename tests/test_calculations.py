import pytest

from services import calculations
from services.calculations import round_half_up


@pytest.mark.parametrize('value, places, expected', [
    (0.25, 1, 0.3),
    (0.35, 1, 0.4),
    (2.675, 2, 2.68),
    (1.005, 2, 1.01),
    (0.096, 2, 0.1),
    (-0.25, 1, -0.3),
    (3.5999999999999996, 2, 3.6),
    (0, 1, 0.0),
])
def test_round_half_up(value, places, expected):
    assert round_half_up(value, places) == expected


def test_daily_kwh_active_only():
    assert calculations.daily_kwh(150, 24) == pytest.approx(3.6)


def test_daily_kwh_adds_standby_outside_active_hours():
    # 60W for 5h plus 2W for the remaining 19h
    assert calculations.daily_kwh(60, 5, 2) == pytest.approx(0.3 + 0.038)


def test_standby_missing_is_zero():
    assert calculations.standby_kwh(None, 3) == 0


def test_estimate_is_unrounded():
    figures = calculations.estimate({
        'power_watts': 100, 'daily_hours': 8, 'usage_days': [1, 2, 3, 4, 5], 'standby_watts': 0,
    })
    assert figures['daily_kwh'] == pytest.approx(0.8)
    assert figures['weekly_kwh'] == pytest.approx(4.0)
    assert figures['monthly_kwh'] == pytest.approx(0.8 * 5 / 7 * 30)


def test_monthly_uses_thirty_day_month():
    assert calculations.monthly_kwh(1.0, 7) == pytest.approx(30.0)
    assert calculations.monthly_kwh(1.0, 3) == pytest.approx(30 * 3 / 7)


def test_sum_estimates():
    totals = calculations.sum_estimates([
        {'daily_kwh': 0.04, 'weekly_kwh': 0.28, 'monthly_kwh': 1.2},
        {'daily_kwh': 0.04, 'weekly_kwh': 0.28, 'monthly_kwh': 1.2},
    ])
    assert totals == pytest.approx({'daily_kwh': 0.08, 'weekly_kwh': 0.56, 'monthly_kwh': 2.4})
    assert calculations.rounded_estimate(totals) == {'daily_kwh': 0.1, 'weekly_kwh': 0.6, 'monthly_kwh': 2.4}


@pytest.mark.parametrize('value, text', [(150.0, '150'), (0.25, '0.25'), (7, '7')])
def test_format_number(value, text):
    assert calculations.format_number(value) == text

# services/calculations.py
# Consumption formulas. Everything here works on unrounded figures;
# rounding is applied only when a figure is reported.

from decimal import Decimal, ROUND_HALF_UP

HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30

KWH_PLACES = 1
COST_PLACES = 2


def round_half_up(value, places):
    """
    Round to `places` decimals, halves away from zero (0.25 -> 0.3).

    Works on the shortest repr of the float, not its binary value, so
    1.005 rounds to 1.01 where a binary rounding would give 1.00.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_kwh(value):
    return round_half_up(value, KWH_PLACES)


def round_cost(value):
    return round_half_up(value, COST_PLACES)


def active_kwh(power_watts, daily_hours):
    return power_watts * daily_hours / 1000


def standby_kwh(standby_watts, daily_hours):
    """Standby draw covers the rest of the 24-hour day"""
    return (standby_watts or 0) * (HOURS_PER_DAY - daily_hours) / 1000


def daily_kwh(power_watts, daily_hours, standby_watts=0):
    return active_kwh(power_watts, daily_hours) + standby_kwh(standby_watts, daily_hours)


def weekly_kwh(daily, usage_day_count):
    return daily * usage_day_count


def monthly_kwh(daily, usage_day_count):
    """30-day month, scaled by the fraction of the week the appliance is used"""
    return daily * (usage_day_count / DAYS_PER_WEEK) * DAYS_PER_MONTH


def estimate(appliance):
    """
    Unrounded daily/weekly/monthly kWh for one appliance record.

    `appliance` is any mapping with power_watts, daily_hours, usage_days
    and optionally standby_watts.
    """
    days = len(appliance['usage_days'])
    daily = daily_kwh(
        appliance['power_watts'],
        appliance['daily_hours'],
        appliance.get('standby_watts', 0)
    )
    return {
        'daily_kwh': daily,
        'weekly_kwh': weekly_kwh(daily, days),
        'monthly_kwh': monthly_kwh(daily, days),
    }


def rounded_estimate(figures):
    """Round each kWh figure of an estimate for presentation"""
    return {key: round_kwh(value) for key, value in figures.items()}


def sum_estimates(estimates):
    """Add up unrounded estimates component by component"""
    totals = {'daily_kwh': 0.0, 'weekly_kwh': 0.0, 'monthly_kwh': 0.0}
    for figures in estimates:
        for key in totals:
            totals[key] += figures[key]
    return totals


def cost(kwh, rate_per_kwh):
    return kwh * rate_per_kwh


def format_number(value):
    """Drop a trailing .0 so formulas read 150W rather than 150.0W"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

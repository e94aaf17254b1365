import pytest

from services.errors import ApplianceServiceError, ErrorKind

ALL_DAYS = [0, 1, 2, 3, 4, 5, 6]
WEEKDAYS = [1, 2, 3, 4, 5]


def test_daily_consumption(make_appliance, consumption_service):
    appliance = make_appliance(power_watts=150, daily_hours=24, usage_days=ALL_DAYS, standby_watts=0)

    result = consumption_service.calculate_daily(appliance['id'])

    assert result['appliance_id'] == appliance['id']
    assert result['daily_kwh'] == 3.6
    assert result['calculation']['power_watts'] == 150
    assert result['calculation']['daily_hours'] == 24
    assert result['calculation']['formula'] == '150W × 24h ÷ 1000 = 3.6 kWh'


def test_daily_consumption_with_standby(make_appliance, consumption_service):
    appliance = make_appliance(power_watts=100, daily_hours=4, standby_watts=10)

    result = consumption_service.calculate_daily(appliance['id'])

    # 0.4 active + 10W * 20h = 0.2 standby
    assert result['daily_kwh'] == 0.6
    assert result['calculation']['active_kwh'] == 0.4
    assert result['calculation']['standby_kwh'] == 0.2
    assert result['calculation']['standby_hours'] == 20
    assert '+ 10W × 20h ÷ 1000' in result['calculation']['formula']


def test_weekly_consumption(make_appliance, consumption_service):
    appliance = make_appliance(power_watts=200, daily_hours=4, usage_days=WEEKDAYS)

    result = consumption_service.calculate_weekly(appliance['id'])

    assert result['weekly_kwh'] == 4.0
    assert result['usage_days'] == 5
    assert result['calculation']['daily_kwh'] == 0.8
    assert result['calculation']['active_days'] == 5
    assert result['calculation']['formula'] == '0.8 kWh/day × 5 days = 4.0 kWh'


def test_monthly_consumption(make_appliance, consumption_service):
    appliance = make_appliance(power_watts=1000, daily_hours=1, usage_days=ALL_DAYS)

    result = consumption_service.calculate_monthly(appliance['id'])

    assert result['monthly_kwh'] == 30.0
    assert result['days_per_month'] == 30
    assert result['calculation']['weeks_per_month'] == 4.29
    assert result['calculation']['active_days_per_week'] == 7


def test_monthly_scales_by_usage_fraction(make_appliance, consumption_service):
    appliance = make_appliance(power_watts=1000, daily_hours=1, usage_days=[0])

    result = consumption_service.calculate_monthly(appliance['id'])

    # 1 kWh * 1/7 * 30
    assert result['monthly_kwh'] == 4.3
    assert result['calculation']['active_days_per_month'] == 4.29


def test_weekly_uses_unrounded_daily(make_appliance, consumption_service):
    # 0.14 kWh a day rounds to 0.1, but a week is 0.98 -> 1.0, not 0.7
    appliance = make_appliance(power_watts=35, daily_hours=4, usage_days=ALL_DAYS)

    assert consumption_service.calculate_daily(appliance['id'])['daily_kwh'] == 0.1
    assert consumption_service.calculate_weekly(appliance['id'])['weekly_kwh'] == 1.0


@pytest.mark.parametrize('method', ['calculate_daily', 'calculate_weekly', 'calculate_monthly'])
def test_calculators_propagate_not_found(consumption_service, method):
    with pytest.raises(ApplianceServiceError) as excinfo:
        getattr(consumption_service, method)(99999)
    assert excinfo.value.kind == ErrorKind.NOT_FOUND
    assert excinfo.value.id == 99999


def test_calculators_treat_oversized_id_as_not_found(consumption_service):
    with pytest.raises(ApplianceServiceError) as excinfo:
        consumption_service.calculate_daily(10 ** 20)
    assert excinfo.value.kind == ErrorKind.NOT_FOUND
    assert excinfo.value.id == 10 ** 20


def test_calculators_propagate_bad_id(consumption_service):
    with pytest.raises(ApplianceServiceError) as excinfo:
        consumption_service.calculate_daily('abc')
    assert excinfo.value.kind == ErrorKind.VALIDATION_ERROR
    assert excinfo.value.field == 'id'


def test_corrupt_record_is_calculation_error(storage, consumption_service):
    storage.run(
        "INSERT INTO appliances (name, power_watts, daily_hours, usage_days, standby_watts, created_at, updated_at) "
        "VALUES (%s, %s, %s, %s, %s, %s, %s)",
        ('Broken', 100, 1, '{"days": 3}', 0, '2026-01-01T00:00:00.000000+00:00', '2026-01-01T00:00:00.000000+00:00')
    )

    with pytest.raises(ApplianceServiceError) as excinfo:
        consumption_service.calculate_weekly(1)
    assert excinfo.value.kind == ErrorKind.CALCULATION_ERROR
    assert excinfo.value.details['error'] == 'DATABASE_ERROR'

    with pytest.raises(ApplianceServiceError) as excinfo:
        consumption_service.calculate_total_daily()
    assert excinfo.value.kind == ErrorKind.CALCULATION_ERROR


# ------------------------------------------------------------- total daily

def test_total_daily(make_appliance, consumption_service):
    fridge = make_appliance(name='Fridge', power_watts=150, daily_hours=24)
    freezer = make_appliance(name='Freezer', power_watts=100, daily_hours=24)

    result = consumption_service.calculate_total_daily()

    assert result['total_daily_kwh'] == 6.0
    assert result['appliance_count'] == 2
    assert result['breakdown'] == [
        {'id': freezer['id'], 'name': 'Freezer', 'daily_kwh': 2.4},
        {'id': fridge['id'], 'name': 'Fridge', 'daily_kwh': 3.6},
    ]


def test_total_daily_empty(consumption_service):
    assert consumption_service.calculate_total_daily() == {
        'total_daily_kwh': 0.0,
        'appliance_count': 0,
        'breakdown': [],
    }


def test_total_daily_ignores_usage_days(make_appliance, consumption_service):
    make_appliance(power_watts=1000, daily_hours=1, usage_days=[3])
    assert consumption_service.calculate_total_daily()['total_daily_kwh'] == 1.0


# -------------------------------------------------------------------- cost

def test_cost_estimate(make_appliance, consumption_service):
    appliance = make_appliance(power_watts=1000, daily_hours=1, usage_days=ALL_DAYS)

    result = consumption_service.calculate_cost(appliance['id'], 0.12)

    assert result == {
        'appliance_id': appliance['id'],
        'daily_cost': 0.12,
        'weekly_cost': 0.84,
        'monthly_cost': 3.6,
        'rate_per_kwh': 0.12,
    }


def test_cost_rounds_half_up_to_cents(make_appliance, consumption_service):
    appliance = make_appliance(power_watts=100, daily_hours=8, usage_days=WEEKDAYS)

    result = consumption_service.calculate_cost(appliance['id'], 0.12)

    assert result['daily_cost'] == 0.10
    assert result['weekly_cost'] == 0.48
    # 0.8 * 5/7 * 30 = 17.142857 kWh
    assert result['monthly_cost'] == 2.06


@pytest.mark.parametrize('rate', [-0.1, 0, None, '0.12', float('inf'), True])
def test_cost_rejects_bad_rate(make_appliance, consumption_service, rate):
    appliance = make_appliance()
    with pytest.raises(ApplianceServiceError) as excinfo:
        consumption_service.calculate_cost(appliance['id'], rate)
    assert excinfo.value.kind == ErrorKind.VALIDATION_ERROR
    assert excinfo.value.field == 'rate_per_kwh'


def test_cost_propagates_not_found(consumption_service):
    with pytest.raises(ApplianceServiceError) as excinfo:
        consumption_service.calculate_cost(12345, 0.2)
    assert excinfo.value.kind == ErrorKind.NOT_FOUND


def test_household_cost_uses_stored_rate(make_appliance, consumption_service, settings_service):
    make_appliance(power_watts=1000, daily_hours=1, usage_days=ALL_DAYS)
    make_appliance(power_watts=500, daily_hours=2, usage_days=ALL_DAYS)

    result = consumption_service.calculate_household_cost()

    assert result['daily_kwh'] == 2.0
    assert result['daily_cost'] == 0.24
    assert result['weekly_cost'] == 1.68
    assert result['monthly_cost'] == 7.2
    assert result['rate_per_kwh'] == 0.12
    assert result['currency'] == 'USD'

    settings_service.set_rate(0.25)
    assert consumption_service.calculate_household_cost()['daily_cost'] == 0.5


def test_household_cost_explicit_rate(make_appliance, consumption_service):
    make_appliance(power_watts=1000, daily_hours=1, usage_days=ALL_DAYS)

    result = consumption_service.calculate_household_cost(0.3)

    assert result['daily_cost'] == 0.3
    assert 'currency' not in result


def test_household_cost_without_settings(appliance_service):
    from services.consumption_service import ConsumptionService

    service = ConsumptionService(appliance_service)
    with pytest.raises(ApplianceServiceError) as excinfo:
        service.calculate_household_cost()
    assert excinfo.value.field == 'rate_per_kwh'


# ------------------------------------------------------------------- chart

def test_chart_daily_series(make_appliance, consumption_service):
    make_appliance(name='Fridge', power_watts=150, daily_hours=24)
    make_appliance(name='Kettle', power_watts=2000, daily_hours=0.25, usage_days=[1, 3])

    series = consumption_service.chart_series('daily')

    assert series == [
        {'name': 'Kettle', 'daily_kwh': 0.5},
        {'name': 'Fridge', 'daily_kwh': 3.6},
    ]


def test_chart_weekly_series(make_appliance, consumption_service):
    make_appliance(name='Kettle', power_watts=2000, daily_hours=0.25, usage_days=[1, 3])

    assert consumption_service.chart_series('weekly') == [
        {'name': 'Kettle', 'weekly_kwh': 1.0, 'usage_days': [1, 3]},
    ]


def test_chart_breakdown_shares(make_appliance, consumption_service):
    make_appliance(name='Fridge', power_watts=150, daily_hours=24)
    make_appliance(name='Freezer', power_watts=100, daily_hours=24)

    shares = {item['name']: item['share_percent'] for item in consumption_service.chart_series('breakdown')}

    assert shares == {'Fridge': 60.0, 'Freezer': 40.0}


def test_chart_breakdown_with_no_consumption(make_appliance, consumption_service):
    make_appliance(name='Unplugged', power_watts=50, daily_hours=0, standby_watts=0)

    assert consumption_service.chart_series('breakdown') == [
        {'name': 'Unplugged', 'daily_kwh': 0.0, 'share_percent': 0.0},
    ]


def test_chart_rejects_unknown_mode(consumption_service):
    with pytest.raises(ApplianceServiceError) as excinfo:
        consumption_service.chart_series('pie')
    assert excinfo.value.kind == ErrorKind.VALIDATION_ERROR
    assert excinfo.value.field == 'mode'

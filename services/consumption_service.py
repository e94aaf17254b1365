# services/consumption_service.py
# Daily / weekly / monthly consumption and cost figures derived from
# appliance records. Nothing here is persisted.

from functools import wraps

from services import calculations
from services.calculations import DAYS_PER_MONTH, DAYS_PER_WEEK, format_number, round_cost, round_kwh
from services.errors import ApplianceServiceError, ErrorKind, passes_through, validation_error
from services.validation_service import validate_rate
from utils.logger import get_logger

logger = get_logger('consumption')

CHART_MODES = ('daily', 'weekly', 'breakdown')


def calculation_step(description):
    """
    Re-raise anything but NOT_FOUND / VALIDATION_ERROR as CALCULATION_ERROR.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if passes_through(e):
                    raise
                logger.error(f"{description} failed: {e}")
                details = e.to_dict() if isinstance(e, ApplianceServiceError) else str(e)
                raise ApplianceServiceError(
                    ErrorKind.CALCULATION_ERROR, f'Failed to calculate {description}', details=details
                ) from e
        return wrapper
    return decorator


class ConsumptionService:
    """Energy and cost estimates built on ApplianceService reads"""

    def __init__(self, appliance_service, settings_service=None):
        self.appliances = appliance_service
        self.settings = settings_service

    def _load(self, appliance_id):
        """Appliance record plus its unrounded estimate"""
        appliance = self.appliances.get_by_id(appliance_id)
        return appliance, calculations.estimate(appliance)

    @calculation_step('daily consumption')
    def calculate_daily(self, appliance_id):
        appliance, figures = self._load(appliance_id)
        daily = figures['daily_kwh']
        standby_hours = calculations.HOURS_PER_DAY - appliance['daily_hours']

        formula = (
            f"{format_number(appliance['power_watts'])}W × {format_number(appliance['daily_hours'])}h ÷ 1000"
        )
        if appliance['standby_watts']:
            formula += (
                f" + {format_number(appliance['standby_watts'])}W × {format_number(standby_hours)}h ÷ 1000"
            )
        formula += f" = {round_kwh(daily)} kWh"

        return {
            'appliance_id': appliance['id'],
            'daily_kwh': round_kwh(daily),
            'calculation': {
                'power_watts': appliance['power_watts'],
                'daily_hours': appliance['daily_hours'],
                'standby_watts': appliance['standby_watts'],
                'standby_hours': standby_hours,
                'active_kwh': round_kwh(calculations.active_kwh(appliance['power_watts'], appliance['daily_hours'])),
                'standby_kwh': round_kwh(calculations.standby_kwh(appliance['standby_watts'], appliance['daily_hours'])),
                'formula': formula,
            }
        }

    @calculation_step('weekly consumption')
    def calculate_weekly(self, appliance_id):
        appliance, figures = self._load(appliance_id)
        days = len(appliance['usage_days'])
        daily = round_kwh(figures['daily_kwh'])
        weekly = round_kwh(figures['weekly_kwh'])

        return {
            'appliance_id': appliance['id'],
            'weekly_kwh': weekly,
            'usage_days': days,
            'calculation': {
                'daily_kwh': daily,
                'active_days': days,
                'formula': f"{daily} kWh/day × {days} days = {weekly} kWh",
            }
        }

    @calculation_step('monthly consumption')
    def calculate_monthly(self, appliance_id):
        appliance, figures = self._load(appliance_id)
        days = len(appliance['usage_days'])
        daily = round_kwh(figures['daily_kwh'])
        monthly = round_kwh(figures['monthly_kwh'])
        active_days_per_month = days / DAYS_PER_WEEK * DAYS_PER_MONTH

        return {
            'appliance_id': appliance['id'],
            'monthly_kwh': monthly,
            'days_per_month': DAYS_PER_MONTH,
            'calculation': {
                'daily_kwh': daily,
                'active_days_per_week': days,
                'active_days_per_month': calculations.round_half_up(active_days_per_month, 2),
                'weeks_per_month': calculations.round_half_up(DAYS_PER_MONTH / DAYS_PER_WEEK, 2),
                'formula': (
                    f"{daily} kWh/day × {days}/{DAYS_PER_WEEK} × {DAYS_PER_MONTH} days = {monthly} kWh"
                ),
            }
        }

    def _daily_breakdown(self):
        """(appliance, unrounded daily kWh) for every appliance, newest first"""
        listing = self.appliances.get_all()
        return [
            (appliance, calculations.estimate(appliance)['daily_kwh'])
            for appliance in listing['appliances']
        ]

    @calculation_step('total daily consumption')
    def calculate_total_daily(self):
        """Whole-household daily kWh with a per-appliance breakdown"""
        total = 0.0
        breakdown = []
        for appliance, daily in self._daily_breakdown():
            total += daily
            breakdown.append({
                'id': appliance['id'],
                'name': appliance['name'],
                'daily_kwh': round_kwh(daily),
            })

        return {
            'total_daily_kwh': round_kwh(total),
            'appliance_count': len(breakdown),
            'breakdown': breakdown,
        }

    def calculate_cost(self, appliance_id, rate_per_kwh):
        """
        Daily, weekly and monthly cost at `rate_per_kwh`.

        Costs are taken from the unrounded kWh figures and rounded to cents.
        """
        if not validate_rate(rate_per_kwh):
            raise validation_error('rate_per_kwh', 'Rate per kWh must be a positive number')
        return self._cost(appliance_id, rate_per_kwh)

    @calculation_step('cost estimates')
    def _cost(self, appliance_id, rate_per_kwh):
        appliance, figures = self._load(appliance_id)
        return {
            'appliance_id': appliance['id'],
            'daily_cost': round_cost(calculations.cost(figures['daily_kwh'], rate_per_kwh)),
            'weekly_cost': round_cost(calculations.cost(figures['weekly_kwh'], rate_per_kwh)),
            'monthly_cost': round_cost(calculations.cost(figures['monthly_kwh'], rate_per_kwh)),
            'rate_per_kwh': rate_per_kwh,
        }

    def calculate_household_cost(self, rate_per_kwh=None):
        """
        Household kWh totals and their cost. Without an explicit rate the
        stored rate_per_kwh setting is used.
        """
        currency = None
        if rate_per_kwh is None:
            if self.settings is None:
                raise validation_error('rate_per_kwh', 'Rate per kWh is required')
            rate_per_kwh = self.settings.get_rate()
            currency = self.settings.get_currency()
        if not validate_rate(rate_per_kwh):
            raise validation_error('rate_per_kwh', 'Rate per kWh must be a positive number')
        return self._household_cost(rate_per_kwh, currency)

    @calculation_step('household cost')
    def _household_cost(self, rate_per_kwh, currency):
        listing = self.appliances.get_all()
        totals = calculations.sum_estimates(
            calculations.estimate(appliance) for appliance in listing['appliances']
        )
        result = {
            'daily_kwh': round_kwh(totals['daily_kwh']),
            'weekly_kwh': round_kwh(totals['weekly_kwh']),
            'monthly_kwh': round_kwh(totals['monthly_kwh']),
            'daily_cost': round_cost(calculations.cost(totals['daily_kwh'], rate_per_kwh)),
            'weekly_cost': round_cost(calculations.cost(totals['weekly_kwh'], rate_per_kwh)),
            'monthly_cost': round_cost(calculations.cost(totals['monthly_kwh'], rate_per_kwh)),
            'rate_per_kwh': rate_per_kwh,
        }
        if currency:
            result['currency'] = currency
        return result

    def chart_series(self, mode='daily'):
        """
        Records for the chart component.

        daily     -> [{name, daily_kwh}]
        weekly    -> [{name, weekly_kwh, usage_days}]
        breakdown -> [{name, daily_kwh, share_percent}]
        """
        if mode not in CHART_MODES:
            raise validation_error('mode', f"Chart mode must be one of: {', '.join(CHART_MODES)}")
        return self._chart_series(mode)

    @calculation_step('chart series')
    def _chart_series(self, mode):
        rows = self._daily_breakdown()

        if mode == 'daily':
            return [{'name': a['name'], 'daily_kwh': round_kwh(daily)} for a, daily in rows]

        if mode == 'weekly':
            return [
                {
                    'name': a['name'],
                    'weekly_kwh': round_kwh(calculations.weekly_kwh(daily, len(a['usage_days']))),
                    'usage_days': list(a['usage_days']),
                }
                for a, daily in rows
            ]

        total = sum(daily for _, daily in rows)
        return [
            {
                'name': a['name'],
                'daily_kwh': round_kwh(daily),
                'share_percent': calculations.round_half_up(daily / total * 100, 1) if total else 0.0,
            }
            for a, daily in rows
        ]

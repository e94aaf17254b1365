# services/validation_service.py
# Appliance input validation (Pydantic) and name sanitization

import math
import re

from pydantic import ValidationError

from models.appliance import ApplianceCreate, ApplianceUpdate
from utils.sanitizer import sanitize_text  # noqa: F401

UPDATABLE_FIELDS = ('name', 'power_watts', 'daily_hours', 'usage_days', 'standby_watts')

FIELD_RULES = {
    'name': 'Name is required and must be 1-100 characters',
    'power_watts': 'Power watts must be a number between 0.1 and 10000',
    'daily_hours': 'Daily hours must be a number between 0 and 24',
    'usage_days': 'Usage days must be a non-empty list of numbers between 0 (Sunday) and 6 (Saturday)',
    'standby_watts': 'Standby watts must be a number between 0 and 1000',
}

REQUIRED_MESSAGES = {
    'name': 'Name is required',
    'power_watts': 'Power watts is required',
    'daily_hours': 'Daily hours is required',
    'usage_days': 'Usage days are required',
}


def _collect_errors(exc):
    """One error per field, in the order Pydantic reports them (field order)"""
    errors = []
    seen = set()
    for error in exc.errors():
        field = str(error['loc'][0]) if error['loc'] else 'data'
        if field in seen:
            continue
        seen.add(field)
        if error['type'] == 'missing':
            message = REQUIRED_MESSAGES.get(field, f'{field} is required')
        else:
            message = FIELD_RULES.get(field, error['msg'])
        errors.append({'field': field, 'message': message})
    return errors


def validate_appliance(data, is_update=False):
    """
    Validate appliance data for create or partial update.

    Returns:
        {'valid': bool, 'errors': [{'field', 'message'}, ...], 'data': model or None}
    """
    if not isinstance(data, dict):
        return {
            'valid': False,
            'errors': [{'field': 'data', 'message': 'Appliance data must be an object'}],
            'data': None
        }

    if is_update:
        if not any(field in data for field in UPDATABLE_FIELDS):
            return {
                'valid': False,
                'errors': [{'field': 'update', 'message': 'Update requires at least one field to be provided'}],
                'data': None
            }
        model = ApplianceUpdate
    else:
        # A null standby value means "not given"
        if data.get('standby_watts') is None:
            data = {k: v for k, v in data.items() if k != 'standby_watts'}
        model = ApplianceCreate

    try:
        validated = model.model_validate(data)
    except ValidationError as e:
        return {
            'valid': False,
            'errors': _collect_errors(e),
            'data': None
        }

    return {
        'valid': True,
        'errors': [],
        'data': validated
    }


def parse_appliance_id(value):
    """
    Normalize an appliance id.

    Accepts ints and digit strings; returns None for anything else
    (missing, blank, booleans, non-numeric text, fractional numbers).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        value = value.strip()
        if re.fullmatch(r'[+-]?\d+', value):
            return int(value)
    return None


def validate_rate(rate):
    """A rate must be a finite number greater than zero"""
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        return False
    return math.isfinite(rate) and rate > 0

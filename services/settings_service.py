# services/settings_service.py
# Rate and currency preferences kept in the settings table

from datetime import datetime, timezone

from database import queries as db
from database.connection import StorageError
from services.errors import ApplianceServiceError, ErrorKind, validation_error
from services.validation_service import validate_rate

DEFAULT_RATE_PER_KWH = 0.12
DEFAULT_CURRENCY = 'USD'


class SettingsService:

    def __init__(self, storage):
        self.storage = storage

    def get(self, key, default=None):
        try:
            value = db.get_setting(self.storage, key)
        except StorageError as e:
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, f"Failed to read setting '{key}'", details=str(e)
            ) from e
        return default if value is None else value

    def set(self, key, value):
        try:
            db.save_setting(self.storage, key, value, datetime.now(timezone.utc).isoformat())
        except StorageError as e:
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, f"Failed to save setting '{key}'", details=str(e)
            ) from e

    def all(self):
        try:
            return db.get_all_settings(self.storage)
        except StorageError as e:
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, 'Failed to read settings', details=str(e)
            ) from e

    def get_rate(self):
        """Stored electricity rate; falls back to the default if unreadable"""
        raw = self.get('rate_per_kwh')
        try:
            rate = float(raw)
        except (TypeError, ValueError):
            return DEFAULT_RATE_PER_KWH
        return rate if validate_rate(rate) else DEFAULT_RATE_PER_KWH

    def set_rate(self, rate):
        if not validate_rate(rate):
            raise validation_error('rate_per_kwh', 'Rate per kWh must be a positive number')
        self.set('rate_per_kwh', repr(float(rate)))
        return float(rate)

    def get_currency(self):
        return self.get('currency', DEFAULT_CURRENCY)

    def set_currency(self, currency):
        if not isinstance(currency, str) or not currency.strip():
            raise validation_error('currency', 'Currency must be a non-empty code such as USD')
        currency = currency.strip().upper()
        self.set('currency', currency)
        return currency

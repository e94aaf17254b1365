# services/appliance_service.py
# Validated CRUD for appliances on top of a storage backend

from datetime import datetime, timedelta, timezone

from database import queries as db
from database.connection import StorageError
from models.appliance import Appliance, ConsumptionEstimates
from services import calculations
from services.errors import ApplianceServiceError, ErrorKind, not_found, validation_error
from services.validation_service import parse_appliance_id, sanitize_text, validate_appliance
from utils.logger import get_logger

logger = get_logger('appliances')

STORAGE_ID_LIMIT = 2 ** 63


def _now():
    return datetime.now(timezone.utc)


def _timestamp(value):
    return value.isoformat(timespec='microseconds')


def _as_datetime(value):
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(value))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class ApplianceService:
    """
    The only path from untrusted appliance input to storage.

    Every public method either returns plain dicts or raises
    ApplianceServiceError (see services/errors.py).
    """

    def __init__(self, storage):
        self.storage = storage

    # ------------------------------------------------------------------ helpers

    def _require_id(self, appliance_id):
        if appliance_id is None or appliance_id == '':
            raise validation_error('id', 'ID is required')
        numeric_id = parse_appliance_id(appliance_id)
        if numeric_id is None:
            raise validation_error('id', 'ID must be numeric')
        return numeric_id

    def _raise_invalid(self, validation):
        first = validation['errors'][0]
        raise validation_error(first['field'], first['message'], details=validation['errors'])

    def _sanitized_name(self, name):
        # Markup-only names are already rejected by the model validator
        return sanitize_text(name)

    def _with_estimates(self, row):
        figures = calculations.estimate(row)
        appliance = Appliance.model_validate({
            **row,
            'consumption_estimates': ConsumptionEstimates(**calculations.rounded_estimate(figures)),
        })
        return appliance.to_dict(), figures

    def _fetch(self, numeric_id):
        # Storage keys are signed 64-bit integers; nothing lives outside that range
        if not -STORAGE_ID_LIMIT <= numeric_id < STORAGE_ID_LIMIT:
            raise not_found(numeric_id)
        row = db.get_appliance(self.storage, numeric_id)
        if row is None:
            raise not_found(numeric_id)
        return row

    # --------------------------------------------------------------- operations

    def create(self, data):
        """
        Validate, sanitize and insert a new appliance.

        Returns:
            The stored appliance (id, fields, created_at, updated_at)
        """
        validation = validate_appliance(data)
        if not validation['valid']:
            self._raise_invalid(validation)

        appliance = validation['data']
        name = self._sanitized_name(appliance.name)
        now = _now()

        try:
            new_id = db.insert_appliance(
                self.storage,
                name=name,
                power_watts=appliance.power_watts,
                daily_hours=appliance.daily_hours,
                usage_days=appliance.usage_days,
                standby_watts=appliance.standby_watts,
                timestamp=_timestamp(now)
            )
        except StorageError as e:
            logger.error(f"Create failed for '{name}': {e}")
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, 'Failed to create appliance', details=str(e)
            ) from e

        logger.info(f"Created appliance {new_id} ({name})")
        return Appliance(
            id=new_id,
            name=name,
            power_watts=appliance.power_watts,
            daily_hours=appliance.daily_hours,
            usage_days=appliance.usage_days,
            standby_watts=appliance.standby_watts,
            created_at=now,
            updated_at=now
        ).to_dict()

    def get_by_id(self, appliance_id):
        """Get one appliance with its consumption estimates"""
        numeric_id = self._require_id(appliance_id)
        try:
            row = self._fetch(numeric_id)
            appliance, _ = self._with_estimates(row)
        except ApplianceServiceError:
            raise
        except (StorageError, ValueError) as e:
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, 'Failed to retrieve appliance', details=str(e)
            ) from e
        return appliance

    def get_all(self):
        """
        All appliances, newest first, with per-item estimates and a household
        total. Totals add the unrounded figures and round once at the end.
        """
        try:
            rows = db.get_all_appliances(self.storage)
            appliances = []
            figures = []
            for row in rows:
                appliance, estimate = self._with_estimates(row)
                appliances.append(appliance)
                figures.append(estimate)
        except (StorageError, ValueError) as e:
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, 'Failed to retrieve appliances', details=str(e)
            ) from e

        return {
            'appliances': appliances,
            'total_consumption': calculations.rounded_estimate(calculations.sum_estimates(figures)),
        }

    def update(self, appliance_id, partial):
        """Change only the supplied fields; returns the appliance as get_by_id does"""
        numeric_id = self._require_id(appliance_id)

        validation = validate_appliance(partial, is_update=True)
        if not validation['valid']:
            self._raise_invalid(validation)

        fields = validation['data'].supplied()
        if 'name' in fields:
            fields['name'] = self._sanitized_name(fields['name'])

        try:
            existing = self._fetch(numeric_id)
            # updated_at must move forward even when the clock has not
            now = _now()
            previous = _as_datetime(existing['updated_at'])
            if now <= previous:
                now = previous + timedelta(microseconds=1)

            changes = db.update_appliance(self.storage, numeric_id, fields, _timestamp(now))
        except ApplianceServiceError:
            raise
        except (StorageError, ValueError) as e:
            logger.error(f"Update of appliance {numeric_id} failed: {e}")
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, 'Failed to update appliance', details=str(e)
            ) from e

        if changes == 0:
            raise not_found(numeric_id)

        logger.info(f"Updated appliance {numeric_id}: {', '.join(sorted(fields))}")
        return self.get_by_id(numeric_id)

    def delete(self, appliance_id):
        """Delete one appliance by id"""
        numeric_id = self._require_id(appliance_id)

        try:
            self._fetch(numeric_id)
            changes = db.delete_appliance(self.storage, numeric_id)
        except ApplianceServiceError:
            raise
        except (StorageError, ValueError) as e:
            raise ApplianceServiceError(
                ErrorKind.DATABASE_ERROR, 'Failed to delete appliance', details=str(e)
            ) from e

        if changes == 0:
            raise not_found(numeric_id)

        logger.info(f"Deleted appliance {numeric_id}")
        return {
            'success': True,
            'id': numeric_id,
            'message': 'Appliance deleted successfully'
        }

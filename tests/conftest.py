# tests/conftest.py
# The project is a flat app folder; put the repository root on sys.path so
# `from services...` style imports resolve without installing.

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from database.connection import SQLiteStorage  # noqa: E402
from services.appliance_service import ApplianceService  # noqa: E402
from services.consumption_service import ConsumptionService  # noqa: E402
from services.settings_service import SettingsService  # noqa: E402


@pytest.fixture
def storage():
    storage = SQLiteStorage(':memory:').open()
    storage.init_schema()
    yield storage
    storage.close()


@pytest.fixture
def appliance_service(storage):
    return ApplianceService(storage)


@pytest.fixture
def settings_service(storage):
    return SettingsService(storage)


@pytest.fixture
def consumption_service(appliance_service, settings_service):
    return ConsumptionService(appliance_service, settings_service)


@pytest.fixture
def make_appliance(appliance_service):
    """Create an appliance with sensible defaults; keyword args override"""
    def _make(**overrides):
        data = {
            'name': 'Refrigerator',
            'power_watts': 150,
            'daily_hours': 24,
            'usage_days': [0, 1, 2, 3, 4, 5, 6],
        }
        data.update(overrides)
        return appliance_service.create(data)
    return _make

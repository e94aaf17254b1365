# models/appliance.py
# Pydantic models for appliance input validation and stored records

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.sanitizer import sanitize_text

NAME_MAX_LENGTH = 100

# 0 = Sunday ... 6 = Saturday
DayOfWeek = Annotated[int, Field(strict=True, ge=0, le=6)]


def _check_name(v):
    """Trim, enforce 1-100 characters and require text that survives sanitizing"""
    stripped = v.strip()
    if not stripped:
        raise ValueError('name must not be blank')
    if len(stripped) > NAME_MAX_LENGTH:
        raise ValueError(f'name must be {NAME_MAX_LENGTH} characters or less')
    if not sanitize_text(stripped):
        raise ValueError('name must contain text once markup is removed')
    return stripped


def _unique_days(v):
    """Days form a set; keep the first occurrence of each, in the given order"""
    return list(dict.fromkeys(v))


class ApplianceCreate(BaseModel):
    """Input for creating an appliance. Field order is the validation order."""
    model_config = ConfigDict(extra='ignore')

    name: str = Field(..., strict=True, description="Appliance name")
    power_watts: float = Field(..., strict=True, allow_inf_nan=False, ge=0.1, le=10000,
                               description="Active power draw in watts")
    daily_hours: float = Field(..., strict=True, allow_inf_nan=False, ge=0, le=24,
                               description="Hours of active use per usage day")
    usage_days: List[DayOfWeek] = Field(..., min_length=1, description="Days of week the appliance is used")
    standby_watts: float = Field(0, strict=True, allow_inf_nan=False, ge=0, le=1000,
                                 description="Power drawn outside active hours")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _check_name(v)

    @field_validator('usage_days')
    @classmethod
    def dedupe_days(cls, v):
        return _unique_days(v)


class ApplianceUpdate(BaseModel):
    """
    Partial update. Every field is optional, but a supplied field obeys the
    same rules as on create (an explicit null is rejected, not ignored).
    Use model_fields_set to see which fields were supplied.
    """
    model_config = ConfigDict(extra='ignore')

    name: str = Field(None, strict=True)
    power_watts: float = Field(None, strict=True, allow_inf_nan=False, ge=0.1, le=10000)
    daily_hours: float = Field(None, strict=True, allow_inf_nan=False, ge=0, le=24)
    usage_days: List[DayOfWeek] = Field(None, min_length=1)
    standby_watts: float = Field(None, strict=True, allow_inf_nan=False, ge=0, le=1000)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _check_name(v)

    @field_validator('usage_days')
    @classmethod
    def dedupe_days(cls, v):
        return _unique_days(v)

    def supplied(self):
        """Only the fields the caller actually sent"""
        return {field: getattr(self, field) for field in self.model_fields_set}


class ConsumptionEstimates(BaseModel):
    daily_kwh: float
    weekly_kwh: float
    monthly_kwh: float


class Appliance(BaseModel):
    """Complete appliance record as read back from storage"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    power_watts: float
    daily_hours: float
    usage_days: List[int]
    standby_watts: float = 0
    created_at: datetime
    updated_at: datetime
    consumption_estimates: Optional[ConsumptionEstimates] = None

    def to_dict(self):
        data = self.model_dump()
        if self.consumption_estimates is None:
            data.pop('consumption_estimates')
        return data

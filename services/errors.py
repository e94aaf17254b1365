# services/errors.py
# Error kinds shared by the appliance and consumption services

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"
    CALCULATION_ERROR = "CALCULATION_ERROR"


class ApplianceServiceError(Exception):
    """
    Tagged service error.

    Callers branch on `kind`; `to_dict()` gives the payload
    {error, message, field?, details?, id?} handed across service boundaries.
    """

    def __init__(self, kind, message, field=None, details=None, id=None):
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.field = field
        self.details = details
        self.id = id

    def to_dict(self):
        payload = {'error': self.kind.value, 'message': self.message}
        if self.field is not None:
            payload['field'] = self.field
        if self.details is not None:
            payload['details'] = self.details
        if self.id is not None:
            payload['id'] = self.id
        return payload

    def __repr__(self):
        return f"ApplianceServiceError({self.kind.value}, {self.message!r})"


def validation_error(field, message, details=None):
    return ApplianceServiceError(ErrorKind.VALIDATION_ERROR, message, field=field, details=details)


def not_found(appliance_id):
    return ApplianceServiceError(ErrorKind.NOT_FOUND, 'Appliance not found', id=appliance_id)


def passes_through(error):
    """NOT_FOUND and VALIDATION_ERROR propagate unchanged through nested calls"""
    return isinstance(error, ApplianceServiceError) and error.kind in (
        ErrorKind.NOT_FOUND, ErrorKind.VALIDATION_ERROR
    )

"""
Ledger error taxonomy.

Every ledger operation validates completely before writing, so raising any
of these errors means no state was changed.
"""

from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for all ledger operation failures."""

    error_code = "ledger_error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.error_code,
            'message': self.message,
            'details': self.details,
        }


class Unauthorized(LedgerError):
    """Caller lacks the required role or relationship."""
    error_code = "unauthorized"
    status_code = 403


class InvalidInput(LedgerError):
    """Malformed or out-of-range arguments."""
    error_code = "invalid_input"


class InvalidFarm(InvalidInput):
    error_code = "invalid_farm"


class InvalidSensor(InvalidInput):
    error_code = "invalid_sensor"


class InvalidMeasurement(InvalidInput):
    error_code = "invalid_measurement"


class InvalidCredit(InvalidInput):
    error_code = "invalid_credit"


class InvalidBuyer(InvalidInput):
    error_code = "invalid_buyer"


class InvalidPractice(InvalidInput):
    error_code = "invalid_practice"


class InvalidPrice(InvalidInput):
    error_code = "invalid_price"


class InvalidAmount(InvalidInput):
    error_code = "invalid_amount"


class NotFound(LedgerError):
    """Referenced entity does not exist."""
    error_code = "not_found"
    status_code = 404


class SensorNotFound(NotFound):
    """Sensor is unknown or no longer active."""
    error_code = "sensor_not_found"


class InvalidState(LedgerError):
    """Operation is illegal for the entity's current lifecycle state."""
    error_code = "invalid_state"
    status_code = 409


class DuplicateSensor(LedgerError):
    error_code = "duplicate_sensor"
    status_code = 409


class InsufficientCredits(LedgerError):
    error_code = "insufficient_credits"
    status_code = 409


class PriceTooHigh(LedgerError):
    error_code = "price_too_high"
    status_code = 409

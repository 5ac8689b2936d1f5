"""
Logging utilities for ledger operations.

This module provides specialized logging functionality for tracking
ledger operations, their performance, and the domain events they emit.
"""

import time
import functools
from typing import Dict, Any, Optional, Callable
from enum import Enum

import structlog

from .errors import LedgerError

logger = structlog.get_logger(__name__)


class OperationType(Enum):
    """Types of ledger operations for logging."""
    FARM_REGISTRY = "farm_registry"
    MEASUREMENT = "measurement"
    VERIFICATION = "verification"
    CREDIT_ISSUANCE = "credit_issuance"
    PRICING = "pricing"
    BUYER_REGISTRY = "buyer_registry"
    MARKETPLACE = "marketplace"
    INCENTIVE = "incentive"


class LogLevel(Enum):
    """Log levels for ledger operations."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def log_ledger_operation(
    operation_type: OperationType,
    operation_name: str,
    level: LogLevel = LogLevel.INFO,
    include_performance: bool = True
):
    """
    Decorator for logging ledger operations with performance metrics.

    Rejections (``LedgerError``) are logged as warnings, anything else as an
    error. The exception is always re-raised.

    Args:
        operation_type: Type of ledger operation
        operation_name: Name of the operation
        level: Log level for start and completion
        include_performance: Whether to include performance metrics
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            operation_id = f"{operation_name}_{int(start_time * 1000)}"

            getattr(logger, level.value)(
                "Ledger operation started",
                operation_id=operation_id,
                operation_type=operation_type.value,
                operation_name=operation_name,
                status="started",
                kwargs_keys=list(kwargs.keys())
            )

            try:
                result = func(*args, **kwargs)
            except LedgerError as e:
                error_data = {
                    "operation_id": operation_id,
                    "operation_type": operation_type.value,
                    "operation_name": operation_name,
                    "status": "rejected",
                    "success": False,
                    "error_type": e.error_code,
                    "error_message": e.message
                }
                if include_performance:
                    error_data["execution_time_seconds"] = time.time() - start_time
                logger.warning("Ledger operation rejected", **error_data)
                raise
            except Exception as e:
                error_data = {
                    "operation_id": operation_id,
                    "operation_type": operation_type.value,
                    "operation_name": operation_name,
                    "status": "failed",
                    "success": False,
                    "error_type": type(e).__name__,
                    "error_message": str(e)
                }
                if include_performance:
                    error_data["execution_time_seconds"] = time.time() - start_time
                logger.error("Ledger operation failed", **error_data)
                raise

            success_data = {
                "operation_id": operation_id,
                "operation_type": operation_type.value,
                "operation_name": operation_name,
                "status": "completed",
                "success": True
            }

            if include_performance:
                execution_time = time.time() - start_time
                success_data.update({
                    "execution_time_seconds": execution_time,
                    "performance_category": _categorize_performance(execution_time)
                })

            getattr(logger, level.value)("Ledger operation completed", **success_data)

            return result

        return wrapper

    return decorator


def log_measurement_event(
    event_type: str,
    measurement_id: str,
    farm_id: str,
    additional_data: Optional[Dict[str, Any]] = None,
    level: LogLevel = LogLevel.INFO
):
    """
    Log carbon measurement events (recorded, verified).

    Args:
        event_type: Type of measurement event
        measurement_id: Measurement identifier
        farm_id: Farm the measurement belongs to
        additional_data: Additional event data
        level: Log level
    """
    log_data = {
        "event_type": "measurement_event",
        "measurement_event_type": event_type,
        "measurement_id": measurement_id,
        "farm_id": farm_id,
    }

    if additional_data:
        log_data.update(additional_data)

    getattr(logger, level.value)("Carbon measurement event", **log_data)


def log_credit_event(
    event_type: str,
    credit_id: str,
    amount: int,
    counterparty: Optional[str] = None,
    additional_data: Optional[Dict[str, Any]] = None,
    level: LogLevel = LogLevel.INFO
):
    """
    Log carbon credit events (issued, purchased).

    Args:
        event_type: Type of credit event
        credit_id: Credit identifier
        amount: Amount involved (tonnes x100)
        counterparty: Farmer or buyer identity
        additional_data: Additional event data
        level: Log level
    """
    log_data = {
        "event_type": "credit_event",
        "credit_event_type": event_type,
        "credit_id": credit_id,
        "amount": amount,
    }

    if counterparty:
        log_data["counterparty"] = counterparty

    if additional_data:
        log_data.update(additional_data)

    getattr(logger, level.value)("Carbon credit event", **log_data)


def _categorize_performance(execution_time: float) -> str:
    """
    Categorize performance based on execution time.

    Args:
        execution_time: Execution time in seconds

    Returns:
        Performance category string
    """
    if execution_time < 0.05:
        return "excellent"
    elif execution_time < 0.2:
        return "good"
    elif execution_time < 1.0:
        return "acceptable"
    else:
        return "slow"


def create_operation_logger(component_name: str) -> structlog.BoundLogger:
    """
    Create a specialized logger for a specific component.

    Args:
        component_name: Name of the component

    Returns:
        Bound logger with component context
    """
    return logger.bind(component=component_name)

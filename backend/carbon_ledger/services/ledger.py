"""
Ledger service facade.

This module wires the registries together around one AuthorizationGuard and
one LedgerClock, and exposes every ledger operation from a single object.
"""

from typing import Any, Dict, Optional

import structlog

from ..authorization import AuthorizationGuard
from ..clock import DatabaseClock, LedgerClock
from ..config import get_authority, get_ledger_config
from .buyer_registry import BuyerRegistry
from .credit_registry import CreditRegistry
from .farm_registry import FarmRegistry
from .incentives import PracticeIncentives
from .marketplace import MarketplaceExchange
from .measurement_ledger import MeasurementLedger
from .statistics import platform_snapshot

logger = structlog.get_logger(__name__)


class LedgerService:
    """
    Entry point for all ledger operations.

    Each component is reachable as an attribute (``farms``, ``measurements``,
    ``credits``, ``buyers``, ``marketplace``, ``incentives``); the most used
    operations are also forwarded directly.
    """

    def __init__(
        self,
        authority: Optional[str] = None,
        clock: Optional[LedgerClock] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.config = config or get_ledger_config()
        self.guard = AuthorizationGuard(authority or get_authority(self.config))
        self.clock = clock or DatabaseClock()

        limits = self.config['limits']
        self.farms = FarmRegistry(self.guard, self.clock, max_practices=limits['max_practices'])
        self.measurements = MeasurementLedger(self.guard, self.clock)
        self.credits = CreditRegistry(self.guard, self.clock, max_co_benefits=limits['max_co_benefits'])
        self.buyers = BuyerRegistry(
            self.guard, self.clock, max_sustainability_goals=limits['max_sustainability_goals']
        )
        self.marketplace = MarketplaceExchange(self.guard, self.clock)
        self.incentives = PracticeIncentives(self.guard, self.clock)

        logger.info(
            "LedgerService initialized",
            authority=self.guard.authority,
            clock=type(self.clock).__name__
        )

    @property
    def authority(self) -> str:
        return self.guard.authority

    # Farm registry
    def register_farm(self, *args, **kwargs):
        return self.farms.register_farm(*args, **kwargs)

    def register_sensor(self, *args, **kwargs):
        return self.farms.register_sensor(*args, **kwargs)

    # Measurement ledger
    def record_sensor_measurement(self, *args, **kwargs):
        return self.measurements.record_sensor_measurement(*args, **kwargs)

    def record_satellite_measurement(self, *args, **kwargs):
        return self.measurements.record_satellite_measurement(*args, **kwargs)

    def verify_measurement(self, *args, **kwargs):
        return self.measurements.verify_measurement(*args, **kwargs)

    # Credits and marketplace
    def issue_credits(self, *args, **kwargs):
        return self.credits.issue_credits(*args, **kwargs)

    def update_price(self, *args, **kwargs):
        return self.credits.update_price(*args, **kwargs)

    def register_buyer(self, *args, **kwargs):
        return self.buyers.register_buyer(*args, **kwargs)

    def verify_buyer(self, *args, **kwargs):
        return self.buyers.verify_buyer(*args, **kwargs)

    def purchase_credits(self, *args, **kwargs):
        return self.marketplace.purchase_credits(*args, **kwargs)

    # Practices and incentives
    def verify_farming_practice(self, *args, **kwargs):
        return self.incentives.verify_farming_practice(*args, **kwargs)

    def issue_incentive_payment(self, *args, **kwargs):
        return self.incentives.issue_incentive_payment(*args, **kwargs)

    # Statistics
    def platform_statistics(self) -> Dict[str, Any]:
        return platform_snapshot()

    def marketplace_statistics(self) -> Dict[str, Any]:
        return self.marketplace.marketplace_snapshot()


_ledger_service: Optional[LedgerService] = None


def get_ledger_service() -> LedgerService:
    """Get the global LedgerService instance, creating it on first use."""
    global _ledger_service
    if _ledger_service is None:
        _ledger_service = LedgerService()
    return _ledger_service


def reset_ledger_service() -> None:
    """Drop the global instance so the next call re-reads configuration."""
    global _ledger_service
    _ledger_service = None

"""
Ledger services for the regenerative carbon platform.
"""

from .buyer_registry import BuyerRegistry
from .credit_registry import CreditRegistry, calculate_co_benefit_premium
from .farm_registry import FarmRegistry, derive_farm_id
from .incentives import PracticeIncentives
from .ledger import LedgerService, get_ledger_service, reset_ledger_service
from .marketplace import MarketplaceExchange, calculate_platform_fee
from .measurement_ledger import MeasurementLedger

__all__ = [
    'BuyerRegistry',
    'CreditRegistry',
    'FarmRegistry',
    'LedgerService',
    'MarketplaceExchange',
    'MeasurementLedger',
    'PracticeIncentives',
    'calculate_co_benefit_premium',
    'calculate_platform_fee',
    'derive_farm_id',
    'get_ledger_service',
    'reset_ledger_service',
]

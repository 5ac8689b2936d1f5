"""
Ledger configuration for the regenerative carbon platform.
"""

import os
from typing import Dict, Any

DEFAULT_AUTHORITY = 'platform-authority'

# Basis points
DEFAULT_PLATFORM_FEE_BPS = 250
CO_BENEFIT_PREMIUM_BPS = 200
BPS_DENOMINATOR = 10_000

DEFAULT_INITIAL_AVERAGE_PRICE = 2500


def get_ledger_config() -> Dict[str, Any]:
    """Get ledger configuration from environment variables."""
    return {
        'authority': os.getenv('LEDGER_AUTHORITY', DEFAULT_AUTHORITY),
        'platform_fee_bps': int(os.getenv('LEDGER_PLATFORM_FEE_BPS', str(DEFAULT_PLATFORM_FEE_BPS))),
        'initial_average_price': int(
            os.getenv('LEDGER_INITIAL_AVERAGE_PRICE', str(DEFAULT_INITIAL_AVERAGE_PRICE))
        ),
        'limits': {
            'max_practices': int(os.getenv('LEDGER_MAX_PRACTICES', '10')),
            'max_co_benefits': int(os.getenv('LEDGER_MAX_CO_BENEFITS', '5')),
            'max_sustainability_goals': int(os.getenv('LEDGER_MAX_SUSTAINABILITY_GOALS', '5')),
        },
    }


def get_authority(config: Dict[str, Any] = None) -> str:
    """Get the platform authority identity."""
    if config is None:
        config = get_ledger_config()
    return config['authority']

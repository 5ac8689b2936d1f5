"""
Read-only platform statistics.
"""

from typing import Any, Dict

from ..models import PlatformStatistics


def platform_snapshot() -> Dict[str, Any]:
    """Current platform totals, average price and fee rate."""
    return PlatformStatistics.load().to_dict()

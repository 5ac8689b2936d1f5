"""
Authorization checks for privileged ledger operations.
"""

import structlog

from .errors import Unauthorized

logger = structlog.get_logger(__name__)


class AuthorizationGuard:
    """
    Decides whether a caller may perform a privileged operation.

    The platform authority identity is injected, so each deployment (or
    test) can choose its own.
    """

    def __init__(self, authority: str):
        if not authority:
            raise ValueError("authority identity must be non-empty")
        self.authority = authority

    def is_authority(self, caller: str) -> bool:
        return caller == self.authority

    def require_authority(self, caller: str, action: str) -> None:
        if not self.is_authority(caller):
            logger.warning("Rejected non-authority caller", caller=caller, action=action)
            raise Unauthorized(
                f"Only the platform authority may {action}",
                details={'caller': caller, 'action': action}
            )

    def require_farm_owner(self, caller: str, farm, action: str = "manage this farm") -> None:
        if caller != farm.owner:
            logger.warning(
                "Rejected caller who does not own the farm",
                caller=caller,
                farm_id=farm.farm_id,
                action=action
            )
            raise Unauthorized(
                f"Only the farm owner may {action}",
                details={'caller': caller, 'farm_id': farm.farm_id}
            )

    def require_owner_or_authority(self, caller: str, farm, action: str) -> None:
        if self.is_authority(caller):
            return
        self.require_farm_owner(caller, farm, action)

    def require_verified_buyer(self, buyer) -> None:
        if not buyer.is_verified:
            logger.warning("Rejected unverified buyer", buyer=buyer.buyer)
            raise Unauthorized(
                "Buyer has not been verified by the platform authority",
                details={'buyer': buyer.buyer}
            )

"""
Corporate buyer registration and verification.
"""

from typing import Iterable, Optional

from django.db import transaction

from ..authorization import AuthorizationGuard
from ..clock import LedgerClock
from ..errors import InvalidBuyer
from ..logging_utils import OperationType, create_operation_logger, log_ledger_operation
from ..models import CorporateBuyer, MAX_LEDGER_INT

logger = create_operation_logger("buyer_registry")


class BuyerRegistry:
    """Owns corporate buyer profiles."""

    def __init__(self, guard: AuthorizationGuard, clock: LedgerClock, max_sustainability_goals: int = 5):
        self.guard = guard
        self.clock = clock
        self.max_sustainability_goals = max_sustainability_goals

    @log_ledger_operation(OperationType.BUYER_REGISTRY, "register_buyer")
    def register_buyer(
        self,
        caller: str,
        company_name: str,
        sustainability_goals: Iterable[str] = (),
        credit_limit: int = 0
    ) -> str:
        sustainability_goals = list(sustainability_goals)

        if not 0 < credit_limit <= MAX_LEDGER_INT:
            raise InvalidBuyer("Credit limit must be positive and fit the ledger range", details={'credit_limit': credit_limit})
        if len(sustainability_goals) > self.max_sustainability_goals:
            raise InvalidBuyer(
                f"A buyer may list at most {self.max_sustainability_goals} sustainability goals",
                details={'goal_count': len(sustainability_goals)}
            )

        with transaction.atomic():
            if CorporateBuyer.objects.filter(pk=caller).exists():
                raise InvalidBuyer("Buyer already registered", details={'buyer': caller})

            CorporateBuyer.objects.create(
                buyer=caller,
                company_name=company_name,
                registration_tick=self.clock.tick(),
                sustainability_goals=sustainability_goals,
                is_verified=False,
                credit_limit=credit_limit,
            )

        logger.info("Buyer registered", buyer=caller, company_name=company_name)
        return caller

    @log_ledger_operation(OperationType.BUYER_REGISTRY, "verify_buyer")
    def verify_buyer(self, caller: str, buyer: str) -> None:
        """Mark a buyer as verified; required before it can purchase."""
        self.guard.require_authority(caller, "verify buyers")

        with transaction.atomic():
            profile = CorporateBuyer.objects.select_for_update().filter(pk=buyer).first()
            if profile is None:
                raise InvalidBuyer("Buyer not registered", details={'buyer': buyer})

            profile.is_verified = True
            profile.save(update_fields=['is_verified', 'updated_at'])

        logger.info("Buyer verified", buyer=buyer)

    def get_buyer(self, buyer: str) -> Optional[CorporateBuyer]:
        return CorporateBuyer.objects.filter(pk=buyer).first()

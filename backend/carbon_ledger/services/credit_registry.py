"""
Carbon credit issuance and pricing.
"""

from typing import Iterable, List, Optional

from django.db import transaction
from django.db.models import F

from ..authorization import AuthorizationGuard
from ..clock import LedgerClock
from ..config import BPS_DENOMINATOR, CO_BENEFIT_PREMIUM_BPS
from ..errors import InvalidCredit, InvalidPrice
from ..identifiers import derive_identifier
from ..logging_utils import (
    OperationType,
    create_operation_logger,
    log_credit_event,
    log_ledger_operation,
)
from ..models import CarbonCredit, CreditStatus, Farm, PlatformStatistics, MAX_LEDGER_INT

MAX_VINTAGE_YEAR = 9999

logger = create_operation_logger("credit_registry")


def calculate_co_benefit_premium(base_price: int, tag_count: int) -> int:
    """Premium of 2% of ``base_price`` per co-benefit tag, truncated."""
    return base_price * (CO_BENEFIT_PREMIUM_BPS * tag_count) // BPS_DENOMINATOR


class CreditRegistry:
    """Owns carbon credits and the global average price."""

    def __init__(self, guard: AuthorizationGuard, clock: LedgerClock, max_co_benefits: int = 5):
        self.guard = guard
        self.clock = clock
        self.max_co_benefits = max_co_benefits

    @log_ledger_operation(OperationType.CREDIT_ISSUANCE, "issue_credits")
    def issue_credits(
        self,
        caller: str,
        farm_id: str,
        farmer: str,
        amount: int,
        vintage: int,
        co_benefits: Iterable[str] = (),
        methodology: str = ""
    ) -> str:
        self.guard.require_authority(caller, "issue credits")
        co_benefits = list(co_benefits)

        if not 0 < amount <= MAX_LEDGER_INT:
            raise InvalidCredit(
                "Credit amount must be positive and fit the ledger range",
                details={'amount': amount}
            )
        if not 0 < vintage <= MAX_VINTAGE_YEAR:
            raise InvalidCredit("Vintage year is out of range", details={'vintage': vintage})
        if len(co_benefits) > self.max_co_benefits:
            raise InvalidCredit(
                f"A credit may carry at most {self.max_co_benefits} co-benefits",
                details={'co_benefit_count': len(co_benefits)}
            )

        with transaction.atomic():
            farm = Farm.objects.select_for_update().filter(pk=farm_id).first()
            if farm is None:
                raise InvalidCredit("Farm not found", details={'farm_id': farm_id})

            statistics = PlatformStatistics.load(for_update=True)
            base_price = statistics.average_price
            unit_price = base_price + calculate_co_benefit_premium(base_price, len(co_benefits))
            if unit_price > MAX_LEDGER_INT:
                raise InvalidCredit("Credit unit price exceeds the ledger range", details={'unit_price': unit_price})
            if max(farm.total_credits_issued, statistics.total_credits_issued) > MAX_LEDGER_INT - amount:
                raise InvalidCredit(
                    "Issued credit totals would exceed the ledger range",
                    details={'amount': amount}
                )

            tick = self.clock.tick()
            credit_id = derive_identifier(farm_id, farmer, amount, vintage, tick)

            CarbonCredit.objects.create(
                credit_id=credit_id,
                farm=farm,
                farmer=farmer,
                issued_amount=amount,
                remaining_amount=amount,
                vintage_year=vintage,
                issuance_tick=tick,
                status=CreditStatus.VERIFIED,
                unit_price=unit_price,
                co_benefits=co_benefits,
                methodology=methodology,
            )

            farm.total_credits_issued = F('total_credits_issued') + amount
            farm.save(update_fields=['total_credits_issued', 'updated_at'])

            statistics.total_credits_issued = F('total_credits_issued') + amount
            statistics.save(update_fields=['total_credits_issued', 'updated_at'])

        log_credit_event(
            "issued",
            credit_id,
            amount,
            counterparty=farmer,
            additional_data={'farm_id': farm_id, 'unit_price': unit_price, 'vintage': vintage}
        )
        return credit_id

    @log_ledger_operation(OperationType.PRICING, "update_price")
    def update_price(self, caller: str, new_average_price: int) -> int:
        self.guard.require_authority(caller, "update the average price")

        if not 0 < new_average_price <= MAX_LEDGER_INT:
            raise InvalidPrice(
                "Average price must be positive and fit the ledger range",
                details={'new_average_price': new_average_price}
            )

        with transaction.atomic():
            statistics = PlatformStatistics.load(for_update=True)
            previous_price = statistics.average_price
            statistics.average_price = new_average_price
            statistics.save(update_fields=['average_price', 'updated_at'])

        logger.info(
            "Average price updated",
            previous_price=previous_price,
            new_average_price=new_average_price
        )
        return new_average_price

    def get_credit(self, credit_id: str) -> Optional[CarbonCredit]:
        return CarbonCredit.objects.filter(pk=credit_id).first()

    def list_available_credits(self, farm_id: Optional[str] = None) -> List[CarbonCredit]:
        queryset = CarbonCredit.objects.filter(status=CreditStatus.VERIFIED, remaining_amount__gt=0)
        if farm_id:
            queryset = queryset.filter(farm_id=farm_id)
        return list(queryset)

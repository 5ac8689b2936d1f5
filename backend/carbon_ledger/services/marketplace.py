"""
Marketplace clearing for carbon credit purchases.

A purchase is checked in a fixed order (credit, buyer profile, buyer
verification, credit status, amount, price) and applied only when every
check passes. The transaction record, credit balance, buyer total and
platform statistics are then written together in one database transaction.
"""

from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Count, F, Sum

from ..authorization import AuthorizationGuard
from ..clock import LedgerClock
from ..config import BPS_DENOMINATOR
from ..errors import (
    InsufficientCredits,
    InvalidAmount,
    InvalidBuyer,
    InvalidCredit,
    InvalidState,
    PriceTooHigh,
)
from ..identifiers import derive_identifier
from ..logging_utils import (
    OperationType,
    create_operation_logger,
    log_credit_event,
    log_ledger_operation,
)
from ..models import (
    CarbonCredit,
    CorporateBuyer,
    CreditStatus,
    CreditTransaction,
    PlatformStatistics,
    MAX_LEDGER_INT,
)
from .credit_registry import calculate_co_benefit_premium

logger = create_operation_logger("marketplace")


def calculate_platform_fee(total_price: int, fee_rate_bps: int) -> int:
    """Platform fee in basis points, truncated."""
    return total_price * fee_rate_bps // BPS_DENOMINATOR


class MarketplaceExchange:
    """Clears credit purchases between farmers and verified buyers."""

    def __init__(self, guard: AuthorizationGuard, clock: LedgerClock):
        self.guard = guard
        self.clock = clock

    @log_ledger_operation(OperationType.MARKETPLACE, "purchase_credits")
    def purchase_credits(
        self,
        caller: str,
        credit_id: str,
        amount: int,
        max_unit_price: int
    ) -> str:
        with transaction.atomic():
            credit = CarbonCredit.objects.select_for_update().filter(pk=credit_id).first()
            if credit is None:
                raise InvalidCredit("Credit not found", details={'credit_id': credit_id})

            buyer = CorporateBuyer.objects.select_for_update().filter(pk=caller).first()
            if buyer is None:
                raise InvalidBuyer("Caller has no buyer profile", details={'buyer': caller})

            self.guard.require_verified_buyer(buyer)

            if credit.status != CreditStatus.VERIFIED:
                raise InvalidState(
                    "Credit is not available for purchase",
                    details={'credit_id': credit_id, 'status': credit.status}
                )
            if amount <= 0:
                raise InvalidAmount("Purchase amount must be positive", details={'amount': amount})
            if amount > credit.remaining_amount:
                raise InsufficientCredits(
                    "Requested amount exceeds the credit's remaining balance",
                    details={'requested': amount, 'remaining': credit.remaining_amount}
                )
            if credit.unit_price > max_unit_price:
                raise PriceTooHigh(
                    "Credit price exceeds the buyer's maximum",
                    details={'unit_price': credit.unit_price, 'max_unit_price': max_unit_price}
                )

            statistics = PlatformStatistics.load(for_update=True)

            total_price = amount * credit.unit_price
            if (
                total_price > MAX_LEDGER_INT
                or statistics.total_revenue > MAX_LEDGER_INT - total_price
                or max(statistics.total_credits_sold, buyer.total_purchases) > MAX_LEDGER_INT - amount
            ):
                raise InvalidAmount(
                    "Purchase total exceeds the ledger range",
                    details={'amount': amount, 'unit_price': credit.unit_price}
                )

            platform_fee = calculate_platform_fee(total_price, statistics.platform_fee_bps)
            farmer_payment = total_price - platform_fee
            co_benefit_premium = calculate_co_benefit_premium(credit.unit_price, len(credit.co_benefits))

            tick = self.clock.tick()
            transaction_id = derive_identifier(credit_id, caller, amount, tick)

            CreditTransaction.objects.create(
                transaction_id=transaction_id,
                credit=credit,
                seller=credit.farmer,
                buyer=caller,
                amount=amount,
                unit_price=credit.unit_price,
                total_price=total_price,
                platform_fee=platform_fee,
                farmer_payment=farmer_payment,
                co_benefit_premium=co_benefit_premium,
                transaction_tick=tick,
            )

            # Any successful purchase marks the credit SOLD, even when a
            # balance remains.
            credit.remaining_amount -= amount
            credit.status = CreditStatus.SOLD
            credit.save(update_fields=['remaining_amount', 'status', 'updated_at'])

            buyer.total_purchases = F('total_purchases') + amount
            buyer.save(update_fields=['total_purchases', 'updated_at'])

            statistics.total_credits_sold = F('total_credits_sold') + amount
            statistics.total_revenue = F('total_revenue') + total_price
            statistics.total_platform_fees = F('total_platform_fees') + platform_fee
            statistics.save(update_fields=[
                'total_credits_sold', 'total_revenue', 'total_platform_fees', 'updated_at'
            ])

        log_credit_event(
            "purchased",
            credit_id,
            amount,
            counterparty=caller,
            additional_data={
                'transaction_id': transaction_id,
                'total_price': total_price,
                'platform_fee': platform_fee,
                'farmer_payment': farmer_payment,
            }
        )
        return transaction_id

    def get_transaction(self, transaction_id: str) -> Optional[CreditTransaction]:
        return CreditTransaction.objects.filter(pk=transaction_id).first()

    def list_credit_transactions(self, credit_id: str) -> List[CreditTransaction]:
        return list(CreditTransaction.objects.filter(credit_id=credit_id))

    def marketplace_snapshot(self) -> Dict[str, Any]:
        """Aggregate marketplace figures computed from the transaction log."""
        totals = CreditTransaction.objects.aggregate(
            transaction_count=Count('transaction_id'),
            volume=Sum('amount'),
            gross_value=Sum('total_price'),
            platform_fees=Sum('platform_fee'),
        )
        available = CarbonCredit.objects.filter(
            status=CreditStatus.VERIFIED,
            remaining_amount__gt=0
        ).aggregate(count=Count('credit_id'), amount=Sum('remaining_amount'))

        snapshot = {
            'transaction_count': totals['transaction_count'],
            'volume_traded': totals['volume'] or 0,
            'gross_value': totals['gross_value'] or 0,
            'platform_fees': totals['platform_fees'] or 0,
            'available_credit_count': available['count'],
            'available_credit_amount': available['amount'] or 0,
            'registered_buyers': CorporateBuyer.objects.count(),
            'verified_buyers': CorporateBuyer.objects.filter(is_verified=True).count(),
        }
        logger.debug("Marketplace snapshot computed", **snapshot)
        return snapshot

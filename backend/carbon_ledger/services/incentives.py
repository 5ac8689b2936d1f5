"""
Farming practice verification and incentive payments.
"""

from typing import List, Optional

from django.db import transaction

from ..authorization import AuthorizationGuard
from ..clock import LedgerClock
from ..errors import InvalidAmount, InvalidFarm, InvalidPractice
from ..identifiers import derive_identifier
from ..logging_utils import OperationType, create_operation_logger, log_ledger_operation
from ..models import (
    Farm,
    IncentivePayment,
    PracticeVerification,
    MAX_LEDGER_INT,
    MAX_NOTES_LENGTH,
    RECOGNIZED_PRACTICES,
)

logger = create_operation_logger("incentives")


class PracticeIncentives:
    """Records practice attestations and the incentive payment log."""

    def __init__(self, guard: AuthorizationGuard, clock: LedgerClock):
        self.guard = guard
        self.clock = clock

    @log_ledger_operation(OperationType.VERIFICATION, "verify_farming_practice")
    def verify_farming_practice(
        self,
        caller: str,
        farm_id: str,
        practice: str,
        compliance_score: int,
        evidence_hash: str = "",
        notes: str = ""
    ) -> str:
        self.guard.require_authority(caller, "verify farming practices")

        if practice not in RECOGNIZED_PRACTICES:
            raise InvalidPractice(
                f"Unrecognized farming practice '{practice}'",
                details={'practice': practice, 'recognized': list(RECOGNIZED_PRACTICES)}
            )
        if not 0 <= compliance_score <= 100:
            raise InvalidPractice(
                "Compliance score must be between 0 and 100",
                details={'compliance_score': compliance_score}
            )
        if len(notes) > MAX_NOTES_LENGTH:
            raise InvalidPractice(
                f"Notes are limited to {MAX_NOTES_LENGTH} characters",
                details={'notes_length': len(notes)}
            )

        with transaction.atomic():
            if not Farm.objects.filter(pk=farm_id).exists():
                raise InvalidFarm("Farm not found", details={'farm_id': farm_id})

            tick = self.clock.tick()
            verification_id = derive_identifier(farm_id, practice, caller, tick)

            PracticeVerification.objects.create(
                verification_id=verification_id,
                farm_id=farm_id,
                practice=practice,
                verifier=caller,
                compliance_score=compliance_score,
                evidence_hash=evidence_hash,
                verification_tick=tick,
                notes=notes,
            )

        logger.info(
            "Farming practice verified",
            verification_id=verification_id,
            farm_id=farm_id,
            practice=practice,
            compliance_score=compliance_score
        )
        return verification_id

    @log_ledger_operation(OperationType.INCENTIVE, "issue_incentive_payment")
    def issue_incentive_payment(
        self,
        caller: str,
        recipient: str,
        farm_id: str,
        amount: int,
        payment_type: str,
        practice: str = ""
    ) -> str:
        self.guard.require_authority(caller, "issue incentive payments")

        if not 0 < amount <= MAX_LEDGER_INT:
            raise InvalidAmount("Incentive amount must be positive and fit the ledger range", details={'amount': amount})

        with transaction.atomic():
            if not Farm.objects.filter(pk=farm_id).exists():
                raise InvalidFarm("Farm not found", details={'farm_id': farm_id})

            tick = self.clock.tick()
            payment_id = derive_identifier(recipient, farm_id, amount, tick)

            IncentivePayment.objects.create(
                payment_id=payment_id,
                recipient=recipient,
                farm_id=farm_id,
                amount=amount,
                payment_type=payment_type,
                payment_tick=tick,
                practice=practice,
            )

        logger.info(
            "Incentive payment recorded",
            payment_id=payment_id,
            recipient=recipient,
            amount=amount,
            payment_type=payment_type
        )
        return payment_id

    def get_practice_verification(self, verification_id: str) -> Optional[PracticeVerification]:
        return PracticeVerification.objects.filter(pk=verification_id).first()

    def list_incentive_payments(self, farm_id: str) -> List[IncentivePayment]:
        return list(IncentivePayment.objects.filter(farm_id=farm_id))

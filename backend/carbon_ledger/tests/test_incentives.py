"""
Unit tests for practice verification and incentive payments.
"""

from django.test import TestCase

from ..errors import InvalidAmount, InvalidFarm, InvalidPractice, Unauthorized
from ..models import IncentivePayment, PracticeVerification, MAX_LEDGER_INT
from .factories import FARMER, make_service, register_farm


class TestPracticeVerification(TestCase):

    def setUp(self):
        self.service = make_service()
        self.farm_id = register_farm(self.service)

    def test_verify_farming_practice(self):
        verification_id = self.service.verify_farming_practice(
            self.service.authority, self.farm_id, 'cover-cropping', 88,
            evidence_hash='ab' * 32, notes='rye and vetch mix'
        )

        record = self.service.incentives.get_practice_verification(verification_id)
        self.assertEqual(record.farm_id, self.farm_id)
        self.assertEqual(record.practice, 'cover-cropping')
        self.assertEqual(record.verifier, self.service.authority)
        self.assertEqual(record.compliance_score, 88)
        self.assertEqual(record.notes, 'rye and vetch mix')

    def test_unrecognized_practice(self):
        with self.assertRaises(InvalidPractice):
            self.service.verify_farming_practice(self.service.authority, self.farm_id, 'hydroponics', 90)
        self.assertFalse(PracticeVerification.objects.exists())

    def test_compliance_score_bounds(self):
        with self.assertRaises(InvalidPractice):
            self.service.verify_farming_practice(self.service.authority, self.farm_id, 'no-till', 101)

        self.service.verify_farming_practice(self.service.authority, self.farm_id, 'no-till', 100)
        self.service.verify_farming_practice(self.service.authority, self.farm_id, 'no-till', 0)
        self.assertEqual(PracticeVerification.objects.count(), 2)

    def test_notes_length(self):
        with self.assertRaises(InvalidPractice):
            self.service.verify_farming_practice(
                self.service.authority, self.farm_id, 'no-till', 90, notes='n' * 129
            )

    def test_requires_authority(self):
        with self.assertRaises(Unauthorized):
            self.service.verify_farming_practice(FARMER, self.farm_id, 'no-till', 90)

    def test_unknown_farm(self):
        with self.assertRaises(InvalidFarm):
            self.service.verify_farming_practice(self.service.authority, '77' * 32, 'no-till', 90)


class TestIncentivePayments(TestCase):

    def setUp(self):
        self.service = make_service()
        self.farm_id = register_farm(self.service)

    def test_issue_incentive_payment(self):
        payment_id = self.service.issue_incentive_payment(
            self.service.authority, FARMER, self.farm_id, 15_000, 'practice-bonus', practice='no-till'
        )

        payment = IncentivePayment.objects.get(pk=payment_id)
        self.assertEqual(payment.recipient, FARMER)
        self.assertEqual(payment.amount, 15_000)
        self.assertEqual(payment.payment_type, 'practice-bonus')
        self.assertEqual(payment.practice, 'no-till')
        self.assertEqual(self.service.incentives.list_incentive_payments(self.farm_id), [payment])

    def test_payment_validation(self):
        with self.assertRaises(InvalidAmount):
            self.service.issue_incentive_payment(self.service.authority, FARMER, self.farm_id, 0, 'bonus')
        with self.assertRaises(InvalidAmount):
            self.service.issue_incentive_payment(
                self.service.authority, FARMER, self.farm_id, MAX_LEDGER_INT + 1, 'bonus'
            )
        with self.assertRaises(Unauthorized):
            self.service.issue_incentive_payment(FARMER, FARMER, self.farm_id, 100, 'bonus')
        with self.assertRaises(InvalidFarm):
            self.service.issue_incentive_payment(self.service.authority, FARMER, '88' * 32, 100, 'bonus')

        self.assertFalse(IncentivePayment.objects.exists())

"""
Ledger models for the regenerative carbon platform.

This module contains Django models for farms, IoT sensors, carbon
measurements and their verification, carbon credits, corporate buyers,
marketplace transactions, practice verifications, incentive payments and
the platform-wide statistics singleton.

All ledger quantities are scaled integers:
- carbon levels and estimates are stored x100
- credit amounts are tonnes x100
- prices and revenue are integer currency units
- NDVI is stored x1000
- coordinates are micro-degrees
"""

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


# Carbon level bounds shared by every measurement source (x100)
MIN_CARBON_LEVEL = 1
MAX_CARBON_LEVEL = 100_000

MAX_CONFIDENCE = 100
MAX_SENSOR_ID_LENGTH = 32
MAX_NOTES_LENGTH = 128

# Largest value a 64-bit integer column can hold
MAX_LEDGER_INT = 2**63 - 1

RECOGNIZED_PRACTICES = (
    'cover-cropping',
    'no-till',
    'rotational-grazing',
    'agroforestry',
    'composting',
    'precision-ag',
)


class TimestampedModel(models.Model):
    """Abstract base model with timestamp fields."""

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when the record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when the record was last updated"
    )

    class Meta:
        abstract = True


def _identifier_field(**kwargs):
    """Primary key holding a 32-byte derived identifier as hex."""
    return models.CharField(
        max_length=64,
        primary_key=True,
        editable=False,
        **kwargs
    )


def _identity_field(**kwargs):
    """Opaque caller identity (owner, buyer, verifier...)."""
    kwargs.setdefault('db_index', True)
    return models.CharField(max_length=64, **kwargs)


class Farm(TimestampedModel):
    """
    A registered regenerative farm.

    The farm id is derived from (owner, latitude, longitude), so the same
    owner can never register the same location twice.
    """

    farm_id = _identifier_field(help_text="Derived farm identifier")

    owner = _identity_field(help_text="Identity of the farm owner")

    latitude = models.BigIntegerField(
        validators=[MinValueValidator(-90_000_000), MaxValueValidator(90_000_000)],
        help_text="Latitude in micro-degrees"
    )

    longitude = models.BigIntegerField(
        validators=[MinValueValidator(-180_000_000), MaxValueValidator(180_000_000)],
        help_text="Longitude in micro-degrees"
    )

    area_hectares = models.PositiveBigIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Farm area in hectares"
    )

    baseline_carbon = models.PositiveBigIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Baseline soil carbon level (x100)"
    )

    registration_tick = models.PositiveBigIntegerField(
        help_text="Ledger tick at registration"
    )

    practices = models.JSONField(
        default=list,
        blank=True,
        help_text="Declared regenerative practices"
    )

    is_verified = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether the platform authority verified this farm"
    )

    total_credits_issued = models.PositiveBigIntegerField(
        default=0,
        help_text="Cumulative credits issued against this farm (tonnes x100)"
    )

    class Meta:
        db_table = 'ledger_farm'
        ordering = ['registration_tick']
        verbose_name = 'Farm'
        verbose_name_plural = 'Farms'

    def __str__(self):
        return f"Farm {self.farm_id[:12]} ({self.owner})"


class Sensor(TimestampedModel):
    """IoT soil-carbon sensor installed on a farm."""

    sensor_id = models.CharField(
        max_length=MAX_SENSOR_ID_LENGTH,
        primary_key=True,
        help_text="Caller supplied sensor identifier"
    )

    farm = models.ForeignKey(
        Farm,
        on_delete=models.PROTECT,
        related_name='sensors',
        help_text="Farm the sensor is installed on"
    )

    sensor_type = models.CharField(
        max_length=64,
        help_text="Sensor hardware type"
    )

    latitude = models.BigIntegerField(help_text="Latitude in micro-degrees")
    longitude = models.BigIntegerField(help_text="Longitude in micro-degrees")

    installation_tick = models.PositiveBigIntegerField()
    calibration_tick = models.PositiveBigIntegerField()

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'ledger_sensor'
        ordering = ['installation_tick']

    def __str__(self):
        state = 'active' if self.is_active else 'inactive'
        return f"Sensor {self.sensor_id} ({self.sensor_type}, {state})"


class MeasurementStatus(models.TextChoices):
    PENDING = 'pending', 'Pending Verification'
    VERIFIED = 'verified', 'Verified'
    # Never produced by any ledger operation
    DISPUTED = 'disputed', 'Disputed'


class SourceKind(models.TextChoices):
    SENSOR = 'sensor', 'IoT Sensor'
    SATELLITE = 'satellite', 'Satellite Imagery'


class CarbonMeasurement(TimestampedModel):
    """
    A single carbon reading for a farm.

    Measurements start PENDING and move to VERIFIED exactly once, when the
    platform authority records a MeasurementVerification for them.
    """

    measurement_id = _identifier_field()

    farm = models.ForeignKey(
        Farm,
        on_delete=models.PROTECT,
        related_name='measurements'
    )

    measurement_tick = models.PositiveBigIntegerField(db_index=True)

    carbon_level = models.PositiveBigIntegerField(
        validators=[MinValueValidator(MIN_CARBON_LEVEL), MaxValueValidator(MAX_CARBON_LEVEL)],
        help_text="Carbon level (x100); overwritten by the verified level"
    )

    source_kind = models.CharField(
        max_length=16,
        choices=SourceKind.choices,
        db_index=True
    )

    source_id = models.CharField(
        max_length=64,
        help_text="Sensor id or satellite provider"
    )

    confidence = models.PositiveSmallIntegerField(
        validators=[MaxValueValidator(MAX_CONFIDENCE)]
    )

    status = models.CharField(
        max_length=16,
        choices=MeasurementStatus.choices,
        default=MeasurementStatus.PENDING,
        db_index=True
    )

    verifier = _identity_field(null=True, blank=True)

    verification_tick = models.PositiveBigIntegerField(null=True, blank=True)

    class Meta:
        db_table = 'ledger_carbon_measurement'
        indexes = [
            models.Index(fields=['farm', 'status'], name='ledger_meas_farm_status_idx'),
            models.Index(fields=['farm', 'verification_tick'], name='ledger_meas_farm_vtick_idx'),
        ]
        ordering = ['measurement_tick']

    def __str__(self):
        return f"{self.source_kind} measurement {self.measurement_id[:12]} - {self.status}"

    @property
    def is_pending(self):
        return self.status == MeasurementStatus.PENDING


class SatelliteObservation(TimestampedModel):
    """Remote-imagery observation paired 1:1 with a satellite measurement."""

    data_id = _identifier_field()

    farm = models.ForeignKey(
        Farm,
        on_delete=models.PROTECT,
        related_name='satellite_observations'
    )

    measurement = models.OneToOneField(
        CarbonMeasurement,
        on_delete=models.PROTECT,
        related_name='satellite_observation'
    )

    provider = models.CharField(max_length=64)

    image_tick = models.PositiveBigIntegerField()

    ndvi = models.IntegerField(
        validators=[MinValueValidator(-1000), MaxValueValidator(1000)],
        help_text="Vegetation index (x1000)"
    )

    carbon_estimate = models.PositiveBigIntegerField(
        help_text="Estimated carbon level (x100)"
    )

    cloud_cover = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)]
    )

    quality_score = models.PositiveSmallIntegerField(
        validators=[MaxValueValidator(100)]
    )

    class Meta:
        db_table = 'ledger_satellite_observation'
        ordering = ['image_tick']

    def __str__(self):
        return f"{self.provider} observation {self.data_id[:12]}"


class MeasurementVerification(TimestampedModel):
    """Outcome asserted by the platform authority for one measurement."""

    verification_id = _identifier_field()

    measurement = models.OneToOneField(
        CarbonMeasurement,
        on_delete=models.PROTECT,
        related_name='verification'
    )

    verifier = _identity_field()

    method = models.CharField(max_length=64)

    verified_level = models.PositiveBigIntegerField()

    confidence = models.PositiveSmallIntegerField(
        validators=[MaxValueValidator(MAX_CONFIDENCE)]
    )

    verification_tick = models.PositiveBigIntegerField()

    notes = models.CharField(max_length=MAX_NOTES_LENGTH, blank=True)

    class Meta:
        db_table = 'ledger_measurement_verification'
        ordering = ['verification_tick']

    def __str__(self):
        return f"Verification {self.verification_id[:12]} by {self.verifier}"


class CreditStatus(models.TextChoices):
    # Never produced; credits are issued directly as VERIFIED
    PENDING = 'pending', 'Pending'
    VERIFIED = 'verified', 'Verified'
    SOLD = 'sold', 'Sold'
    # Never produced; there is no retirement operation
    RETIRED = 'retired', 'Retired'


class CarbonCredit(TimestampedModel):
    """
    Tradable carbon credit issued against a farm.

    ``remaining_amount`` is the purchasable balance and only ever decreases.
    """

    credit_id = _identifier_field()

    farm = models.ForeignKey(
        Farm,
        on_delete=models.PROTECT,
        related_name='credits'
    )

    farmer = _identity_field(help_text="Identity receiving sale proceeds")

    issued_amount = models.PositiveBigIntegerField(
        help_text="Amount issued (tonnes x100)"
    )

    remaining_amount = models.PositiveBigIntegerField(
        help_text="Unsold balance (tonnes x100)"
    )

    vintage_year = models.PositiveIntegerField()

    issuance_tick = models.PositiveBigIntegerField(db_index=True)

    status = models.CharField(
        max_length=16,
        choices=CreditStatus.choices,
        default=CreditStatus.VERIFIED,
        db_index=True
    )

    unit_price = models.PositiveBigIntegerField(
        help_text="Price per unit including co-benefit premium"
    )

    co_benefits = models.JSONField(default=list, blank=True)

    methodology = models.CharField(max_length=128, blank=True)

    class Meta:
        db_table = 'ledger_carbon_credit'
        indexes = [
            models.Index(fields=['status', 'remaining_amount'], name='ledger_credit_status_rem_idx'),
        ]
        ordering = ['issuance_tick']

    def __str__(self):
        return f"Credit {self.credit_id[:12]} - {self.remaining_amount}/{self.issued_amount} ({self.status})"

    @property
    def sold_amount(self):
        return self.issued_amount - self.remaining_amount


class CorporateBuyer(TimestampedModel):
    """Corporate purchaser of carbon credits."""

    buyer = models.CharField(
        max_length=64,
        primary_key=True,
        help_text="Buyer identity"
    )

    company_name = models.CharField(max_length=200)

    registration_tick = models.PositiveBigIntegerField()

    total_purchases = models.PositiveBigIntegerField(
        default=0,
        help_text="Cumulative purchased amount (tonnes x100)"
    )

    sustainability_goals = models.JSONField(default=list, blank=True)

    is_verified = models.BooleanField(default=False, db_index=True)

    credit_limit = models.PositiveBigIntegerField(
        validators=[MinValueValidator(1)]
    )

    class Meta:
        db_table = 'ledger_corporate_buyer'
        ordering = ['registration_tick']

    def __str__(self):
        return f"{self.company_name} ({self.buyer})"


class CreditTransaction(TimestampedModel):
    """Immutable record of a cleared marketplace purchase."""

    transaction_id = _identifier_field()

    credit = models.ForeignKey(
        CarbonCredit,
        on_delete=models.PROTECT,
        related_name='transactions'
    )

    seller = _identity_field()
    buyer = _identity_field()

    amount = models.PositiveBigIntegerField()
    unit_price = models.PositiveBigIntegerField()
    total_price = models.PositiveBigIntegerField()
    platform_fee = models.PositiveBigIntegerField()
    farmer_payment = models.PositiveBigIntegerField()
    co_benefit_premium = models.PositiveBigIntegerField()

    transaction_tick = models.PositiveBigIntegerField(db_index=True)

    class Meta:
        db_table = 'ledger_credit_transaction'
        ordering = ['transaction_tick']

    def __str__(self):
        return f"Transaction {self.transaction_id[:12]}: {self.amount} @ {self.unit_price}"


class PracticeVerification(TimestampedModel):
    """Authority attestation that a farm follows a regenerative practice."""

    verification_id = _identifier_field()

    farm = models.ForeignKey(
        Farm,
        on_delete=models.PROTECT,
        related_name='practice_verifications'
    )

    practice = models.CharField(
        max_length=32,
        choices=[(p, p) for p in RECOGNIZED_PRACTICES]
    )

    verifier = _identity_field()

    compliance_score = models.PositiveSmallIntegerField(
        validators=[MaxValueValidator(100)]
    )

    evidence_hash = models.CharField(max_length=128, blank=True)

    verification_tick = models.PositiveBigIntegerField()

    notes = models.CharField(max_length=MAX_NOTES_LENGTH, blank=True)

    class Meta:
        db_table = 'ledger_practice_verification'
        ordering = ['verification_tick']

    def __str__(self):
        return f"{self.practice} on {self.farm_id[:12]} - {self.compliance_score}%"


class IncentivePayment(TimestampedModel):
    """Append-only record of an incentive paid to a farmer."""

    payment_id = _identifier_field()

    recipient = _identity_field()

    farm = models.ForeignKey(
        Farm,
        on_delete=models.PROTECT,
        related_name='incentive_payments'
    )

    amount = models.PositiveBigIntegerField(validators=[MinValueValidator(1)])

    payment_type = models.CharField(max_length=64)

    payment_tick = models.PositiveBigIntegerField()

    practice = models.CharField(max_length=32, blank=True)

    class Meta:
        db_table = 'ledger_incentive_payment'
        ordering = ['payment_tick']

    def __str__(self):
        return f"{self.payment_type} payment of {self.amount} to {self.recipient}"


class PlatformStatistics(TimestampedModel):
    """
    Process-wide totals.

    Counters only grow; ``average_price`` is the one value the authority
    may replace.
    """

    SINGLETON_PK = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_PK, editable=False)

    total_credits_issued = models.PositiveBigIntegerField(default=0)
    total_credits_sold = models.PositiveBigIntegerField(default=0)
    total_revenue = models.PositiveBigIntegerField(default=0)
    total_platform_fees = models.PositiveBigIntegerField(default=0)
    total_verified_carbon = models.PositiveBigIntegerField(default=0)

    average_price = models.PositiveBigIntegerField()

    platform_fee_bps = models.PositiveIntegerField(
        validators=[MaxValueValidator(10_000)]
    )

    class Meta:
        db_table = 'ledger_platform_statistics'
        verbose_name = 'Platform Statistics'
        verbose_name_plural = 'Platform Statistics'

    def __str__(self):
        return f"Platform statistics (avg price {self.average_price}, fee {self.platform_fee_bps} bps)"

    @classmethod
    def load(cls, for_update=False):
        """Return the singleton row, creating it from configuration if needed."""
        from .config import get_ledger_config

        config = get_ledger_config()
        cls.objects.get_or_create(
            pk=cls.SINGLETON_PK,
            defaults={
                'average_price': config['initial_average_price'],
                'platform_fee_bps': config['platform_fee_bps'],
            }
        )
        queryset = cls.objects.select_for_update() if for_update else cls.objects
        return queryset.get(pk=cls.SINGLETON_PK)

    def to_dict(self):
        return {
            'total_credits_issued': self.total_credits_issued,
            'total_credits_sold': self.total_credits_sold,
            'total_revenue': self.total_revenue,
            'total_platform_fees': self.total_platform_fees,
            'total_verified_carbon': self.total_verified_carbon,
            'average_price': self.average_price,
            'platform_fee_bps': self.platform_fee_bps,
        }


class LedgerSequence(models.Model):
    """Persisted monotonic counter backing DatabaseClock."""

    SINGLETON_PK = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_PK, editable=False)
    value = models.PositiveBigIntegerField(default=0)

    class Meta:
        db_table = 'ledger_sequence'

    def __str__(self):
        return f"Ledger sequence at {self.value}"

"""
Carbon measurement ingestion and verification.

Sensor and satellite sources feed measurements into the ledger as PENDING
records. The platform authority then verifies each measurement once,
which fixes its carbon level and adds it to the verified-carbon total.
"""

from typing import List, Optional

from django.db import transaction
from django.db.models import F

from ..authorization import AuthorizationGuard
from ..clock import LedgerClock
from ..errors import InvalidFarm, InvalidMeasurement, InvalidState, NotFound, SensorNotFound
from ..identifiers import derive_child, derive_identifier
from ..logging_utils import (
    OperationType,
    create_operation_logger,
    log_ledger_operation,
    log_measurement_event,
)
from ..models import (
    CarbonMeasurement,
    Farm,
    MeasurementStatus,
    MeasurementVerification,
    PlatformStatistics,
    SatelliteObservation,
    Sensor,
    SourceKind,
    MAX_CARBON_LEVEL,
    MAX_CONFIDENCE,
    MAX_NOTES_LENGTH,
    MIN_CARBON_LEVEL,
)

logger = create_operation_logger("measurement_ledger")

NDVI_SCALE = 1000


def validate_carbon_level(carbon_level: int) -> bool:
    return MIN_CARBON_LEVEL <= carbon_level <= MAX_CARBON_LEVEL


def validate_percentage(value: int) -> bool:
    return 0 <= value <= MAX_CONFIDENCE


class MeasurementLedger:
    """Owns carbon measurements, satellite observations and verifications."""

    def __init__(self, guard: AuthorizationGuard, clock: LedgerClock):
        self.guard = guard
        self.clock = clock

    @log_ledger_operation(OperationType.MEASUREMENT, "record_sensor_measurement")
    def record_sensor_measurement(
        self,
        caller: str,
        sensor_id: str,
        carbon_level: int,
        confidence: int
    ) -> str:
        with transaction.atomic():
            sensor = Sensor.objects.filter(pk=sensor_id, is_active=True).first()
            if sensor is None:
                raise SensorNotFound(
                    "Sensor not found or inactive",
                    details={'sensor_id': sensor_id}
                )

            if not validate_carbon_level(carbon_level):
                raise InvalidMeasurement(
                    f"Carbon level must be in ({MIN_CARBON_LEVEL - 1}, {MAX_CARBON_LEVEL}]",
                    details={'carbon_level': carbon_level}
                )
            if not validate_percentage(confidence):
                raise InvalidMeasurement(
                    "Confidence must be between 0 and 100",
                    details={'confidence': confidence}
                )

            tick = self.clock.tick()
            measurement_id = derive_identifier(sensor_id, carbon_level, tick)

            CarbonMeasurement.objects.create(
                measurement_id=measurement_id,
                farm_id=sensor.farm_id,
                measurement_tick=tick,
                carbon_level=carbon_level,
                source_kind=SourceKind.SENSOR,
                source_id=sensor_id,
                confidence=confidence,
                status=MeasurementStatus.PENDING,
            )

        log_measurement_event(
            "recorded",
            measurement_id,
            sensor.farm_id,
            {'source_kind': SourceKind.SENSOR.value, 'sensor_id': sensor_id, 'submitted_by': caller}
        )
        return measurement_id

    @log_ledger_operation(OperationType.MEASUREMENT, "record_satellite_measurement")
    def record_satellite_measurement(
        self,
        caller: str,
        farm_id: str,
        provider: str,
        ndvi: int,
        carbon_estimate: int,
        quality_score: int,
        cloud_cover: int = 0
    ) -> str:
        self.guard.require_authority(caller, "record satellite measurements")

        with transaction.atomic():
            if not Farm.objects.filter(pk=farm_id).exists():
                raise InvalidFarm("Farm not found", details={'farm_id': farm_id})

            if not -NDVI_SCALE <= ndvi <= NDVI_SCALE:
                raise InvalidMeasurement("NDVI must be between -1000 and 1000", details={'ndvi': ndvi})
            if not validate_carbon_level(carbon_estimate):
                raise InvalidMeasurement(
                    f"Carbon estimate must be in ({MIN_CARBON_LEVEL - 1}, {MAX_CARBON_LEVEL}]",
                    details={'carbon_estimate': carbon_estimate}
                )
            if not validate_percentage(quality_score):
                raise InvalidMeasurement(
                    "Quality score must be between 0 and 100",
                    details={'quality_score': quality_score}
                )
            if not validate_percentage(cloud_cover):
                raise InvalidMeasurement(
                    "Cloud cover must be between 0 and 100",
                    details={'cloud_cover': cloud_cover}
                )

            tick = self.clock.tick()
            data_id = derive_identifier(farm_id, provider, tick)
            measurement_id = derive_child(data_id, provider)

            measurement = CarbonMeasurement.objects.create(
                measurement_id=measurement_id,
                farm_id=farm_id,
                measurement_tick=tick,
                carbon_level=carbon_estimate,
                source_kind=SourceKind.SATELLITE,
                source_id=provider,
                confidence=quality_score,
                status=MeasurementStatus.PENDING,
            )
            SatelliteObservation.objects.create(
                data_id=data_id,
                farm_id=farm_id,
                measurement=measurement,
                provider=provider,
                image_tick=tick,
                ndvi=ndvi,
                carbon_estimate=carbon_estimate,
                cloud_cover=cloud_cover,
                quality_score=quality_score,
            )

        log_measurement_event(
            "recorded",
            measurement_id,
            farm_id,
            {'source_kind': SourceKind.SATELLITE.value, 'provider': provider, 'data_id': data_id}
        )
        return measurement_id

    @log_ledger_operation(OperationType.VERIFICATION, "verify_measurement")
    def verify_measurement(
        self,
        caller: str,
        measurement_id: str,
        verified_level: int,
        method: str,
        notes: str = ""
    ) -> str:
        self.guard.require_authority(caller, "verify measurements")

        with transaction.atomic():
            measurement = (
                CarbonMeasurement.objects.select_for_update()
                .filter(pk=measurement_id)
                .first()
            )
            if measurement is None:
                raise NotFound("Measurement not found", details={'measurement_id': measurement_id})
            if not measurement.is_pending:
                raise InvalidState(
                    "Only pending measurements can be verified",
                    details={'measurement_id': measurement_id, 'status': measurement.status}
                )
            if not validate_carbon_level(verified_level):
                raise InvalidMeasurement(
                    f"Verified level must be in ({MIN_CARBON_LEVEL - 1}, {MAX_CARBON_LEVEL}]",
                    details={'verified_level': verified_level}
                )
            if len(notes) > MAX_NOTES_LENGTH:
                raise InvalidMeasurement(
                    f"Verification notes are limited to {MAX_NOTES_LENGTH} characters",
                    details={'notes_length': len(notes)}
                )

            statistics = PlatformStatistics.load(for_update=True)

            tick = self.clock.tick()
            verification_id = derive_identifier(measurement_id, caller, tick)

            MeasurementVerification.objects.create(
                verification_id=verification_id,
                measurement=measurement,
                verifier=caller,
                method=method,
                verified_level=verified_level,
                confidence=measurement.confidence,
                verification_tick=tick,
                notes=notes,
            )

            measurement.carbon_level = verified_level
            measurement.status = MeasurementStatus.VERIFIED
            measurement.verifier = caller
            measurement.verification_tick = tick
            measurement.save(update_fields=[
                'carbon_level', 'status', 'verifier', 'verification_tick', 'updated_at'
            ])

            statistics.total_verified_carbon = F('total_verified_carbon') + verified_level
            statistics.save(update_fields=['total_verified_carbon', 'updated_at'])

        log_measurement_event(
            "verified",
            measurement_id,
            measurement.farm_id,
            {'verification_id': verification_id, 'verified_level': verified_level, 'method': method}
        )
        return verification_id

    def latest_verified_level(self, farm_id: str) -> Optional[int]:
        measurement = (
            CarbonMeasurement.objects
            .filter(farm_id=farm_id, status=MeasurementStatus.VERIFIED)
            .order_by('-verification_tick')
            .first()
        )
        return measurement.carbon_level if measurement else None

    def calculate_sequestration(self, farm_id: str) -> int:
        """
        Carbon sequestered above the farm's baseline (x100).

        Computed at read time from the latest verified measurement; 0 when
        the farm has none or is at or below its baseline.
        """
        farm = Farm.objects.filter(pk=farm_id).first()
        if farm is None:
            raise InvalidFarm("Farm not found", details={'farm_id': farm_id})

        latest = self.latest_verified_level(farm_id)
        if latest is None:
            return 0
        return max(0, latest - farm.baseline_carbon)

    def get_measurement(self, measurement_id: str) -> Optional[CarbonMeasurement]:
        return CarbonMeasurement.objects.filter(pk=measurement_id).first()

    def get_measurement_verification(self, measurement_id: str) -> Optional[MeasurementVerification]:
        return MeasurementVerification.objects.filter(measurement_id=measurement_id).first()

    def get_satellite_observation(self, data_id: str) -> Optional[SatelliteObservation]:
        return SatelliteObservation.objects.filter(pk=data_id).first()

    def list_farm_measurements(self, farm_id: str, status: Optional[str] = None) -> List[CarbonMeasurement]:
        queryset = CarbonMeasurement.objects.filter(farm_id=farm_id)
        if status:
            queryset = queryset.filter(status=status)
        return list(queryset)

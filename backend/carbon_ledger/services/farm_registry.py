"""
Farm and sensor registration.
"""

from typing import Iterable, List, Optional

from django.db import transaction

from ..authorization import AuthorizationGuard
from ..clock import LedgerClock
from ..errors import DuplicateSensor, InvalidFarm, InvalidSensor, SensorNotFound
from ..identifiers import derive_identifier
from ..logging_utils import OperationType, create_operation_logger, log_ledger_operation
from ..models import Farm, Sensor, MAX_LEDGER_INT, MAX_SENSOR_ID_LENGTH

logger = create_operation_logger("farm_registry")

MAX_LATITUDE = 90_000_000
MAX_LONGITUDE = 180_000_000


def derive_farm_id(owner: str, latitude: int, longitude: int) -> str:
    """Farm ids depend only on the owner and the location."""
    return derive_identifier(owner, latitude, longitude)


def validate_coordinates(latitude: int, longitude: int) -> bool:
    return -MAX_LATITUDE <= latitude <= MAX_LATITUDE and -MAX_LONGITUDE <= longitude <= MAX_LONGITUDE


class FarmRegistry:
    """Owns farm records and their IoT sensors."""

    def __init__(self, guard: AuthorizationGuard, clock: LedgerClock, max_practices: int = 10):
        self.guard = guard
        self.clock = clock
        self.max_practices = max_practices

    @log_ledger_operation(OperationType.FARM_REGISTRY, "register_farm")
    def register_farm(
        self,
        owner: str,
        latitude: int,
        longitude: int,
        area: int,
        baseline_carbon: int,
        practices: Iterable[str] = ()
    ) -> str:
        practices = list(practices)

        if not 0 < area <= MAX_LEDGER_INT:
            raise InvalidFarm("Farm area must be positive and fit the ledger range", details={'area': area})
        if not 0 < baseline_carbon <= MAX_LEDGER_INT:
            raise InvalidFarm(
                "Baseline carbon must be positive and fit the ledger range",
                details={'baseline_carbon': baseline_carbon}
            )
        if not validate_coordinates(latitude, longitude):
            raise InvalidFarm(
                "Farm location is out of range",
                details={'latitude': latitude, 'longitude': longitude}
            )
        if len(practices) > self.max_practices:
            raise InvalidFarm(
                f"A farm may declare at most {self.max_practices} practices",
                details={'practice_count': len(practices)}
            )

        farm_id = derive_farm_id(owner, latitude, longitude)

        with transaction.atomic():
            if Farm.objects.filter(pk=farm_id).exists():
                raise InvalidFarm(
                    "Farm already registered for this owner and location",
                    details={'farm_id': farm_id}
                )

            Farm.objects.create(
                farm_id=farm_id,
                owner=owner,
                latitude=latitude,
                longitude=longitude,
                area_hectares=area,
                baseline_carbon=baseline_carbon,
                registration_tick=self.clock.tick(),
                practices=practices,
            )

        logger.info("Farm registered", farm_id=farm_id, owner=owner, area_hectares=area)
        return farm_id

    @log_ledger_operation(OperationType.FARM_REGISTRY, "register_sensor")
    def register_sensor(
        self,
        caller: str,
        sensor_id: str,
        farm_id: str,
        sensor_type: str,
        latitude: int,
        longitude: int
    ) -> str:
        with transaction.atomic():
            farm = Farm.objects.filter(pk=farm_id).first()
            if farm is None:
                raise InvalidFarm("Farm not found", details={'farm_id': farm_id})

            self.guard.require_farm_owner(caller, farm, "register sensors")

            if not sensor_id or len(sensor_id) > MAX_SENSOR_ID_LENGTH:
                raise InvalidSensor(
                    f"Sensor id must be 1-{MAX_SENSOR_ID_LENGTH} characters",
                    details={'sensor_id': sensor_id}
                )
            if not validate_coordinates(latitude, longitude):
                raise InvalidSensor(
                    "Sensor location is out of range",
                    details={'latitude': latitude, 'longitude': longitude}
                )
            if Sensor.objects.filter(pk=sensor_id).exists():
                raise DuplicateSensor(
                    "Sensor already registered",
                    details={'sensor_id': sensor_id}
                )

            tick = self.clock.tick()
            Sensor.objects.create(
                sensor_id=sensor_id,
                farm=farm,
                sensor_type=sensor_type,
                latitude=latitude,
                longitude=longitude,
                installation_tick=tick,
                calibration_tick=tick,
                is_active=True,
            )

        logger.info("Sensor registered", sensor_id=sensor_id, farm_id=farm_id, sensor_type=sensor_type)
        return sensor_id

    @log_ledger_operation(OperationType.FARM_REGISTRY, "calibrate_sensor")
    def calibrate_sensor(self, caller: str, sensor_id: str) -> int:
        with transaction.atomic():
            sensor = self._get_active_sensor_for_update(sensor_id)
            self.guard.require_farm_owner(caller, sensor.farm, "calibrate sensors")

            sensor.calibration_tick = self.clock.tick()
            sensor.save(update_fields=['calibration_tick', 'updated_at'])

        return sensor.calibration_tick

    @log_ledger_operation(OperationType.FARM_REGISTRY, "deactivate_sensor")
    def deactivate_sensor(self, caller: str, sensor_id: str) -> None:
        with transaction.atomic():
            sensor = self._get_active_sensor_for_update(sensor_id)
            self.guard.require_owner_or_authority(caller, sensor.farm, "deactivate sensors")

            sensor.is_active = False
            sensor.save(update_fields=['is_active', 'updated_at'])

        logger.info("Sensor deactivated", sensor_id=sensor_id, caller=caller)

    @log_ledger_operation(OperationType.FARM_REGISTRY, "verify_farm")
    def verify_farm(self, caller: str, farm_id: str) -> None:
        self.guard.require_authority(caller, "verify farms")

        with transaction.atomic():
            farm = Farm.objects.select_for_update().filter(pk=farm_id).first()
            if farm is None:
                raise InvalidFarm("Farm not found", details={'farm_id': farm_id})

            farm.is_verified = True
            farm.save(update_fields=['is_verified', 'updated_at'])

        logger.info("Farm verified", farm_id=farm_id)

    def get_farm(self, farm_id: str) -> Optional[Farm]:
        return Farm.objects.filter(pk=farm_id).first()

    def get_sensor(self, sensor_id: str) -> Optional[Sensor]:
        return Sensor.objects.filter(pk=sensor_id).first()

    def list_farm_sensors(self, farm_id: str) -> List[Sensor]:
        return list(Sensor.objects.filter(farm_id=farm_id))

    def _get_active_sensor_for_update(self, sensor_id: str) -> Sensor:
        sensor = (
            Sensor.objects.select_for_update()
            .select_related('farm')
            .filter(pk=sensor_id, is_active=True)
            .first()
        )
        if sensor is None:
            raise SensorNotFound("Sensor not found or inactive", details={'sensor_id': sensor_id})
        return sensor

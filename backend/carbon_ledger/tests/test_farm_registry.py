"""
Unit tests for farm and sensor registration.
"""

from django.test import TestCase

from ..errors import DuplicateSensor, InvalidFarm, InvalidSensor, SensorNotFound, Unauthorized
from ..models import Farm, Sensor, MAX_LEDGER_INT
from ..services import derive_farm_id
from .factories import (
    FARM_LATITUDE,
    FARM_LONGITUDE,
    FARMER,
    STRANGER,
    make_service,
    register_farm,
    register_sensor,
)


class TestFarmRegistration(TestCase):
    """Test cases for register_farm."""

    def setUp(self):
        self.service = make_service()

    def test_register_farm(self):
        farm_id = register_farm(self.service)

        farm = Farm.objects.get(pk=farm_id)
        self.assertEqual(farm_id, derive_farm_id(FARMER, FARM_LATITUDE, FARM_LONGITUDE))
        self.assertEqual(farm.owner, FARMER)
        self.assertEqual(farm.area_hectares, 100)
        self.assertEqual(farm.baseline_carbon, 4520)
        self.assertEqual(farm.practices, ['no-till', 'composting'])
        self.assertFalse(farm.is_verified)
        self.assertEqual(farm.total_credits_issued, 0)

    def test_reregistering_same_owner_and_location_fails(self):
        register_farm(self.service)

        with self.assertRaises(InvalidFarm):
            register_farm(self.service, area=250, baseline_carbon=9000)

        self.assertEqual(Farm.objects.count(), 1)

    def test_same_location_different_owner_is_allowed(self):
        first = register_farm(self.service)
        second = register_farm(self.service, owner=STRANGER)
        self.assertNotEqual(first, second)

    def test_invalid_area_and_baseline(self):
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, area=0)
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, baseline_carbon=0)
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, baseline_carbon=-5)

        self.assertEqual(Farm.objects.count(), 0)

    def test_location_out_of_range(self):
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, latitude=90_000_001)
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, longitude=-180_000_001)

    def test_area_and_baseline_beyond_column_range(self):
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, area=MAX_LEDGER_INT + 1)
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, baseline_carbon=10**19)

        self.assertEqual(Farm.objects.count(), 0)

    def test_too_many_practices(self):
        with self.assertRaises(InvalidFarm):
            register_farm(self.service, practices=['no-till'] * 11)

    def test_verify_farm_requires_authority(self):
        farm_id = register_farm(self.service)

        with self.assertRaises(Unauthorized):
            self.service.farms.verify_farm(FARMER, farm_id)
        self.assertFalse(Farm.objects.get(pk=farm_id).is_verified)

        self.service.farms.verify_farm(self.service.authority, farm_id)
        self.assertTrue(Farm.objects.get(pk=farm_id).is_verified)

    def test_verify_unknown_farm(self):
        with self.assertRaises(InvalidFarm):
            self.service.farms.verify_farm(self.service.authority, 'ab' * 32)


class TestSensorRegistration(TestCase):
    """Test cases for sensor registration and lifecycle."""

    def setUp(self):
        self.service = make_service()
        self.farm_id = register_farm(self.service)

    def test_register_sensor(self):
        register_sensor(self.service, self.farm_id)

        sensor = Sensor.objects.get(pk='soil-probe-1')
        self.assertEqual(sensor.farm_id, self.farm_id)
        self.assertTrue(sensor.is_active)
        self.assertEqual(sensor.installation_tick, sensor.calibration_tick)
        self.assertEqual(self.service.farms.list_farm_sensors(self.farm_id), [sensor])

    def test_only_owner_can_register_sensor(self):
        with self.assertRaises(Unauthorized):
            register_sensor(self.service, self.farm_id, owner=STRANGER)
        self.assertFalse(Sensor.objects.exists())

    def test_unknown_farm(self):
        with self.assertRaises(InvalidFarm):
            register_sensor(self.service, 'cd' * 32)

    def test_duplicate_sensor(self):
        register_sensor(self.service, self.farm_id)
        with self.assertRaises(DuplicateSensor):
            register_sensor(self.service, self.farm_id)

    def test_sensor_id_length(self):
        with self.assertRaises(InvalidSensor):
            register_sensor(self.service, self.farm_id, sensor_id='x' * 33)
        with self.assertRaises(InvalidSensor):
            register_sensor(self.service, self.farm_id, sensor_id='')

        register_sensor(self.service, self.farm_id, sensor_id='x' * 32)

    def test_deactivate_sensor(self):
        register_sensor(self.service, self.farm_id)

        with self.assertRaises(Unauthorized):
            self.service.farms.deactivate_sensor(STRANGER, 'soil-probe-1')

        self.service.farms.deactivate_sensor(FARMER, 'soil-probe-1')
        self.assertFalse(Sensor.objects.get(pk='soil-probe-1').is_active)

        with self.assertRaises(SensorNotFound):
            self.service.farms.deactivate_sensor(FARMER, 'soil-probe-1')

    def test_authority_can_deactivate_sensor(self):
        register_sensor(self.service, self.farm_id)
        self.service.farms.deactivate_sensor(self.service.authority, 'soil-probe-1')
        self.assertFalse(Sensor.objects.get(pk='soil-probe-1').is_active)

    def test_calibrate_sensor_advances_tick(self):
        register_sensor(self.service, self.farm_id)
        installed = Sensor.objects.get(pk='soil-probe-1').installation_tick

        tick = self.service.farms.calibrate_sensor(FARMER, 'soil-probe-1')

        self.assertGreater(tick, installed)
        self.assertEqual(Sensor.objects.get(pk='soil-probe-1').calibration_tick, tick)

    def test_sensor_location_out_of_range(self):
        with self.assertRaises(InvalidSensor):
            self.service.register_sensor(FARMER, 'soil-probe-1', self.farm_id, 'soil-carbon', 10**19, 0)
        self.assertFalse(Sensor.objects.exists())

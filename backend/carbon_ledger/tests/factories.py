"""
Shared builders for ledger tests.
"""

from carbon_ledger.clock import CounterClock
from carbon_ledger.models import PlatformStatistics
from carbon_ledger.services import LedgerService

AUTHORITY = 'authority-0x01'
FARMER = 'farmer-0xaa'
BUYER = 'buyer-0xbb'
STRANGER = 'stranger-0xcc'

FARM_LATITUDE = 40_712_776
FARM_LONGITUDE = -74_005_974


def make_service(authority=AUTHORITY):
    return LedgerService(authority=authority, clock=CounterClock())


def register_farm(service, owner=FARMER, latitude=FARM_LATITUDE, longitude=FARM_LONGITUDE,
                  area=100, baseline_carbon=4520, practices=('no-till', 'composting')):
    return service.register_farm(owner, latitude, longitude, area, baseline_carbon, practices)


def register_sensor(service, farm_id, sensor_id='soil-probe-1', owner=FARMER):
    return service.register_sensor(owner, sensor_id, farm_id, 'soil-carbon', FARM_LATITUDE, FARM_LONGITUDE)


def issue_credit(service, farm_id, amount=1000, co_benefits=('biodiversity', 'water-quality')):
    return service.issue_credits(
        service.authority, farm_id, FARMER, amount, 2024, co_benefits, 'VM0042'
    )


def register_verified_buyer(service, buyer=BUYER, credit_limit=5000):
    service.register_buyer(buyer, 'Acme Corp', ['net-zero-2030'], credit_limit)
    service.verify_buyer(service.authority, buyer)
    return buyer


def set_fee_rate(fee_bps):
    PlatformStatistics.load()
    PlatformStatistics.objects.filter(pk=PlatformStatistics.SINGLETON_PK).update(platform_fee_bps=fee_bps)

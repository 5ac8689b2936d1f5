"""
Ledger API views.

This module provides REST API endpoints for every ledger operation and the
read-only queries over farms, sensors, measurements, credits, buyers,
transactions, practice verifications and platform statistics.

The caller identity is taken from the ``X-Ledger-Caller`` header. Ledger
rejections propagate to ``common.middleware.custom_exception_handler``.
"""

from rest_framework.decorators import api_view
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework import status
import structlog

from .services import get_ledger_service

logger = structlog.get_logger(__name__)

CALLER_HEADER = 'X-Ledger-Caller'


def _get_caller(request):
    caller = request.headers.get(CALLER_HEADER)
    if not caller:
        raise ParseError(f"{CALLER_HEADER} header is required")
    return caller


def _int_param(data, name, default=None):
    value = data.get(name, default)
    if value is None:
        raise ParseError(f"Missing required field: {name}")
    if isinstance(value, bool):
        raise ParseError(f"Field {name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ParseError(f"Field {name} must be an integer")


def _str_param(data, name, default=None):
    value = data.get(name, default)
    if value is None:
        raise ParseError(f"Missing required field: {name}")
    return str(value)


def _list_param(data, name):
    value = data.get(name) or []
    if not isinstance(value, list):
        raise ParseError(f"Field {name} must be a list")
    return [str(item) for item in value]


def _not_found(entity, key):
    return Response(
        {"status": "error", "message": f"{entity} {key} not found"},
        status=status.HTTP_404_NOT_FOUND
    )


def serialize_farm(farm):
    return {
        'farm_id': farm.farm_id,
        'owner': farm.owner,
        'location': {
            'latitude': farm.latitude,
            'longitude': farm.longitude
        },
        'area_hectares': farm.area_hectares,
        'baseline_carbon': farm.baseline_carbon,
        'registration_tick': farm.registration_tick,
        'practices': farm.practices,
        'is_verified': farm.is_verified,
        'total_credits_issued': farm.total_credits_issued,
    }


def serialize_sensor(sensor):
    return {
        'sensor_id': sensor.sensor_id,
        'farm_id': sensor.farm_id,
        'sensor_type': sensor.sensor_type,
        'location': {
            'latitude': sensor.latitude,
            'longitude': sensor.longitude
        },
        'installation_tick': sensor.installation_tick,
        'calibration_tick': sensor.calibration_tick,
        'is_active': sensor.is_active,
    }


def serialize_measurement(measurement):
    return {
        'measurement_id': measurement.measurement_id,
        'farm_id': measurement.farm_id,
        'measurement_tick': measurement.measurement_tick,
        'carbon_level': measurement.carbon_level,
        'source_kind': measurement.source_kind,
        'source_id': measurement.source_id,
        'confidence': measurement.confidence,
        'status': measurement.status,
        'verifier': measurement.verifier,
        'verification_tick': measurement.verification_tick,
    }


def serialize_credit(credit):
    return {
        'credit_id': credit.credit_id,
        'farm_id': credit.farm_id,
        'farmer': credit.farmer,
        'issued_amount': credit.issued_amount,
        'remaining_amount': credit.remaining_amount,
        'vintage_year': credit.vintage_year,
        'issuance_tick': credit.issuance_tick,
        'status': credit.status,
        'unit_price': credit.unit_price,
        'co_benefits': credit.co_benefits,
        'methodology': credit.methodology,
    }


def serialize_buyer(buyer):
    return {
        'buyer': buyer.buyer,
        'company_name': buyer.company_name,
        'registration_tick': buyer.registration_tick,
        'total_purchases': buyer.total_purchases,
        'sustainability_goals': buyer.sustainability_goals,
        'is_verified': buyer.is_verified,
        'credit_limit': buyer.credit_limit,
    }


def serialize_transaction(credit_transaction):
    return {
        'transaction_id': credit_transaction.transaction_id,
        'credit_id': credit_transaction.credit_id,
        'seller': credit_transaction.seller,
        'buyer': credit_transaction.buyer,
        'amount': credit_transaction.amount,
        'unit_price': credit_transaction.unit_price,
        'total_price': credit_transaction.total_price,
        'platform_fee': credit_transaction.platform_fee,
        'farmer_payment': credit_transaction.farmer_payment,
        'co_benefit_premium': credit_transaction.co_benefit_premium,
        'transaction_tick': credit_transaction.transaction_tick,
    }


def serialize_practice_verification(verification):
    return {
        'verification_id': verification.verification_id,
        'farm_id': verification.farm_id,
        'practice': verification.practice,
        'verifier': verification.verifier,
        'compliance_score': verification.compliance_score,
        'evidence_hash': verification.evidence_hash,
        'verification_tick': verification.verification_tick,
        'notes': verification.notes,
    }


def serialize_incentive_payment(payment):
    return {
        'payment_id': payment.payment_id,
        'recipient': payment.recipient,
        'farm_id': payment.farm_id,
        'amount': payment.amount,
        'payment_type': payment.payment_type,
        'payment_tick': payment.payment_tick,
        'practice': payment.practice,
    }


def _created(data):
    return Response({'status': 'success', 'data': data}, status=status.HTTP_201_CREATED)


def _ok(data):
    return Response({'status': 'success', 'data': data}, status=status.HTTP_200_OK)


# Farms and sensors

@api_view(['POST'])
def register_farm(request):
    """
    Register a farm for the calling owner.

    POST data:
    - latitude, longitude: micro-degrees
    - area: hectares
    - baseline_carbon: baseline level (x100)
    - practices: declared practices (optional)
    """
    caller = _get_caller(request)
    data = request.data

    farm_id = get_ledger_service().register_farm(
        caller,
        _int_param(data, 'latitude'),
        _int_param(data, 'longitude'),
        _int_param(data, 'area'),
        _int_param(data, 'baseline_carbon'),
        practices=_list_param(data, 'practices')
    )
    logger.info("Farm registered via API", farm_id=farm_id, owner=caller)
    return _created({'farm_id': farm_id})


@api_view(['GET'])
def farm_detail(request, farm_id):
    service = get_ledger_service()
    farm = service.farms.get_farm(farm_id)
    if farm is None:
        return _not_found('Farm', farm_id)

    farm_data = serialize_farm(farm)
    farm_data['sequestration'] = service.measurements.calculate_sequestration(farm_id)
    farm_data['sensors'] = [serialize_sensor(sensor) for sensor in service.farms.list_farm_sensors(farm_id)]
    return _ok(farm_data)


@api_view(['POST'])
def verify_farm(request, farm_id):
    get_ledger_service().farms.verify_farm(_get_caller(request), farm_id)
    return _ok({'farm_id': farm_id, 'is_verified': True})


@api_view(['POST'])
def register_sensor(request):
    """
    Register an IoT sensor on a farm owned by the caller.

    POST data:
    - sensor_id: caller supplied id (max 32 characters)
    - farm_id: farm to install on
    - sensor_type: hardware type
    - latitude, longitude: micro-degrees
    """
    caller = _get_caller(request)
    data = request.data

    sensor_id = get_ledger_service().register_sensor(
        caller,
        _str_param(data, 'sensor_id'),
        _str_param(data, 'farm_id'),
        _str_param(data, 'sensor_type'),
        _int_param(data, 'latitude'),
        _int_param(data, 'longitude')
    )
    return _created({'sensor_id': sensor_id})


@api_view(['GET'])
def sensor_detail(request, sensor_id):
    sensor = get_ledger_service().farms.get_sensor(sensor_id)
    if sensor is None:
        return _not_found('Sensor', sensor_id)
    return _ok(serialize_sensor(sensor))


@api_view(['POST'])
def deactivate_sensor(request, sensor_id):
    get_ledger_service().farms.deactivate_sensor(_get_caller(request), sensor_id)
    return _ok({'sensor_id': sensor_id, 'is_active': False})


@api_view(['POST'])
def calibrate_sensor(request, sensor_id):
    tick = get_ledger_service().farms.calibrate_sensor(_get_caller(request), sensor_id)
    return _ok({'sensor_id': sensor_id, 'calibration_tick': tick})


# Measurements

@api_view(['POST'])
def record_sensor_measurement(request):
    caller = _get_caller(request)
    data = request.data

    measurement_id = get_ledger_service().record_sensor_measurement(
        caller,
        _str_param(data, 'sensor_id'),
        _int_param(data, 'carbon_level'),
        _int_param(data, 'confidence')
    )
    return _created({'measurement_id': measurement_id})


@api_view(['POST'])
def record_satellite_measurement(request):
    caller = _get_caller(request)
    data = request.data

    measurement_id = get_ledger_service().record_satellite_measurement(
        caller,
        _str_param(data, 'farm_id'),
        _str_param(data, 'provider'),
        _int_param(data, 'ndvi'),
        _int_param(data, 'carbon_estimate'),
        _int_param(data, 'quality_score'),
        cloud_cover=_int_param(data, 'cloud_cover', 0)
    )
    return _created({'measurement_id': measurement_id})


@api_view(['GET'])
def measurement_detail(request, measurement_id):
    measurement = get_ledger_service().measurements.get_measurement(measurement_id)
    if measurement is None:
        return _not_found('Measurement', measurement_id)
    return _ok(serialize_measurement(measurement))


@api_view(['POST'])
def verify_measurement(request, measurement_id):
    caller = _get_caller(request)
    data = request.data

    verification_id = get_ledger_service().verify_measurement(
        caller,
        measurement_id,
        _int_param(data, 'verified_level'),
        _str_param(data, 'method'),
        notes=_str_param(data, 'notes', '')
    )
    return _created({'verification_id': verification_id})


# Credits

@api_view(['POST'])
def issue_credits(request):
    caller = _get_caller(request)
    data = request.data

    credit_id = get_ledger_service().issue_credits(
        caller,
        _str_param(data, 'farm_id'),
        _str_param(data, 'farmer'),
        _int_param(data, 'amount'),
        _int_param(data, 'vintage'),
        co_benefits=_list_param(data, 'co_benefits'),
        methodology=_str_param(data, 'methodology', '')
    )
    return _created({'credit_id': credit_id})


@api_view(['GET'])
def list_available_credits(request):
    credits = get_ledger_service().credits.list_available_credits(farm_id=request.GET.get('farm_id'))
    return _ok({'credits': [serialize_credit(credit) for credit in credits]})


@api_view(['GET'])
def credit_detail(request, credit_id):
    credit = get_ledger_service().credits.get_credit(credit_id)
    if credit is None:
        return _not_found('Credit', credit_id)
    return _ok(serialize_credit(credit))


@api_view(['POST'])
def update_price(request):
    new_price = get_ledger_service().update_price(
        _get_caller(request),
        _int_param(request.data, 'average_price')
    )
    return _ok({'average_price': new_price})


# Buyers and marketplace

@api_view(['POST'])
def register_buyer(request):
    caller = _get_caller(request)
    data = request.data

    buyer = get_ledger_service().register_buyer(
        caller,
        _str_param(data, 'company_name'),
        sustainability_goals=_list_param(data, 'sustainability_goals'),
        credit_limit=_int_param(data, 'credit_limit')
    )
    return _created({'buyer': buyer})


@api_view(['GET'])
def buyer_detail(request, buyer):
    profile = get_ledger_service().buyers.get_buyer(buyer)
    if profile is None:
        return _not_found('Buyer', buyer)
    return _ok(serialize_buyer(profile))


@api_view(['POST'])
def verify_buyer(request, buyer):
    get_ledger_service().verify_buyer(_get_caller(request), buyer)
    return _ok({'buyer': buyer, 'is_verified': True})


@api_view(['POST'])
def purchase_credits(request):
    caller = _get_caller(request)
    data = request.data

    transaction_id = get_ledger_service().purchase_credits(
        caller,
        _str_param(data, 'credit_id'),
        _int_param(data, 'amount'),
        _int_param(data, 'max_unit_price')
    )
    logger.info("Credit purchase cleared via API", transaction_id=transaction_id, buyer=caller)
    return _created({'transaction_id': transaction_id})


@api_view(['GET'])
def transaction_detail(request, transaction_id):
    credit_transaction = get_ledger_service().marketplace.get_transaction(transaction_id)
    if credit_transaction is None:
        return _not_found('Transaction', transaction_id)
    return _ok(serialize_transaction(credit_transaction))


# Practices and incentives

@api_view(['POST'])
def verify_farming_practice(request):
    caller = _get_caller(request)
    data = request.data

    verification_id = get_ledger_service().verify_farming_practice(
        caller,
        _str_param(data, 'farm_id'),
        _str_param(data, 'practice'),
        _int_param(data, 'compliance_score'),
        evidence_hash=_str_param(data, 'evidence_hash', ''),
        notes=_str_param(data, 'notes', '')
    )
    return _created({'verification_id': verification_id})


@api_view(['GET'])
def practice_verification_detail(request, verification_id):
    verification = get_ledger_service().incentives.get_practice_verification(verification_id)
    if verification is None:
        return _not_found('Practice verification', verification_id)
    return _ok(serialize_practice_verification(verification))


@api_view(['POST'])
def issue_incentive_payment(request):
    caller = _get_caller(request)
    data = request.data

    payment_id = get_ledger_service().issue_incentive_payment(
        caller,
        _str_param(data, 'recipient'),
        _str_param(data, 'farm_id'),
        _int_param(data, 'amount'),
        _str_param(data, 'payment_type'),
        practice=_str_param(data, 'practice', '')
    )
    return _created({'payment_id': payment_id})


@api_view(['GET'])
def farm_incentive_payments(request, farm_id):
    payments = get_ledger_service().incentives.list_incentive_payments(farm_id)
    return _ok({'payments': [serialize_incentive_payment(payment) for payment in payments]})


# Statistics

@api_view(['GET'])
def platform_statistics(request):
    return _ok(get_ledger_service().platform_statistics())


@api_view(['GET'])
def marketplace_statistics(request):
    return _ok(get_ledger_service().marketplace_statistics())

from datetime import datetime
from django.db import connection
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
import structlog

from carbon_ledger.clock import DatabaseClock
from carbon_ledger.models import PlatformStatistics

logger = structlog.get_logger(__name__)


@api_view(['GET'])
def health_check(request):
    """
    Health check endpoint that verifies:
    - Database connection
    - Ledger sequence readability
    """
    health_status = {
        'status': 'ok',
        'timestamp': None,
        'services': {
            'database': {'status': 'unknown'},
            'ledger': {'status': 'unknown'}
        }
    }

    overall_status = True

    # Check database connection
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status['services']['database']['status'] = 'healthy'
        logger.info("Database health check passed")
    except Exception as e:
        health_status['services']['database']['status'] = 'unhealthy'
        health_status['services']['database']['error'] = str(e)
        overall_status = False
        logger.error("Database health check failed", error=str(e))

    # Check the ledger tables are reachable
    try:
        current_tick = DatabaseClock().current()
        statistics = PlatformStatistics.load()
        health_status['services']['ledger'] = {
            'status': 'healthy',
            'current_tick': current_tick,
            'average_price': statistics.average_price,
            'platform_fee_bps': statistics.platform_fee_bps,
        }
        logger.info("Ledger health check passed", current_tick=current_tick)
    except Exception as e:
        health_status['services']['ledger']['status'] = 'unhealthy'
        health_status['services']['ledger']['error'] = str(e)
        overall_status = False
        logger.error("Ledger health check failed", error=str(e))

    if not overall_status:
        health_status['status'] = 'degraded'

    health_status['timestamp'] = datetime.utcnow().isoformat()

    http_status = status.HTTP_200_OK if overall_status else status.HTTP_503_SERVICE_UNAVAILABLE

    logger.info("Health check completed",
                overall_status=health_status['status'],
                database_status=health_status['services']['database']['status'],
                ledger_status=health_status['services']['ledger']['status'])

    return Response(health_status, status=http_status)

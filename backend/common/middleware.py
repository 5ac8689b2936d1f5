import structlog
import traceback
from datetime import datetime
from django.http import JsonResponse
from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from carbon_ledger.errors import LedgerError

logger = structlog.get_logger(__name__)


def _error_body(error_type, message, status_code, details=None):
    body = {
        'type': error_type,
        'message': message,
        'status_code': status_code,
        'timestamp': datetime.utcnow().isoformat(),
    }
    if details is not None:
        body['details'] = details
    return {'error': body}


def _ledger_error_body(exc):
    return _error_body(exc.error_code, exc.message, exc.status_code, exc.details)


class GlobalExceptionMiddleware:
    """
    Global exception handling middleware for Django.

    Ledger rejections that escape outside DRF views keep their status code;
    anything else becomes a structured 500 response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, LedgerError):
            logger.warning(
                "Ledger rejection outside API view",
                error_type=exception.error_code,
                path=request.path,
                method=request.method
            )
            return JsonResponse(_ledger_error_body(exception), status=exception.status_code)

        logger.error(
            "Unhandled exception occurred",
            exception_type=type(exception).__name__,
            exception_message=str(exception),
            path=request.path,
            method=request.method,
            exc_info=True
        )

        error_response = _error_body(
            'internal_server_error',
            'An internal server error occurred',
            status.HTTP_500_INTERNAL_SERVER_ERROR
        )

        # In development, include more details
        if settings.DEBUG:
            error_response['error']['debug'] = {
                'exception_type': type(exception).__name__,
                'exception_message': str(exception),
                'traceback': traceback.format_exc().split('\n')
            }

        return JsonResponse(error_response, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def custom_exception_handler(exc, context):
    """
    Exception handler for Django REST Framework.

    Maps ledger rejections to their HTTP status (400, 403, 404 or 409) and
    wraps DRF's own errors in the same envelope.
    """
    request = context.get('request')
    view_name = getattr(context.get('view'), '__class__', type(None)).__name__
    log_context = {
        'path': getattr(request, 'path', None),
        'method': getattr(request, 'method', None),
        'view_name': view_name,
    }

    if isinstance(exc, LedgerError):
        logger.warning(
            "Ledger operation rejected",
            error_type=exc.error_code,
            exception_message=exc.message,
            status_code=exc.status_code,
            **log_context
        )
        return Response(_ledger_error_body(exc), status=exc.status_code)

    response = drf_exception_handler(exc, context)

    if response is not None:
        logger.warning(
            "API exception occurred",
            exception_type=type(exc).__name__,
            exception_message=str(exc),
            status_code=response.status_code,
            **log_context
        )
        response.data = _error_body('api_error', 'API request failed', response.status_code, response.data)

    return response

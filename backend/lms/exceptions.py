import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from registrations.exceptions import InvalidStateTransition

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    if isinstance(exc, InvalidStateTransition):
        logger.info('Rejected workflow transition: %s', exc)
        return Response(
            {'detail': str(exc), 'code': exc.code, 'status_code': status.HTTP_409_CONFLICT},
            status=status.HTTP_409_CONFLICT,
        )

    response = exception_handler(exc, context)

    if response is not None and isinstance(response.data, dict):
        response.data['status_code'] = response.status_code

    return response

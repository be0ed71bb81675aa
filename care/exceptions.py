"""
API error types and the project wide DRF exception handler.

Services raise these ``APIException`` subclasses directly; the handler
below renders every error, expected or not, into the
``{success: false, message}`` envelope the client understands.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class BookingAlreadyProcessed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid or already processed booking'
    default_code = 'already_processed'


class InvalidDoctor(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid doctor selection'
    default_code = 'invalid_doctor'


class InvalidTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Status transition not allowed'
    default_code = 'invalid_transition'


class NotLinkedToPatient(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not authorized to access this patient'
    default_code = 'not_linked'


class DuplicateAccount(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'User already exists'
    default_code = 'duplicate_account'


def _flatten(detail) -> str:
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _flatten(detail['detail'])
        return '; '.join(f'{k}: {_flatten(v)}' for k, v in detail.items())
    if isinstance(detail, (list, tuple)):
        return ' '.join(_flatten(d) for d in detail)
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled error while serving %s', context.get('request').path if context.get('request') else '?')
        return Response({'success': False, 'message': 'Something went wrong!'}, status=500)
    # normalize response; keep field errors for validation failures
    body = {'success': False, 'message': _flatten(resp.data)}
    if resp.status_code == 400 and isinstance(resp.data, dict) and 'detail' not in resp.data:
        body['errors'] = resp.data
    resp.data = body
    return resp

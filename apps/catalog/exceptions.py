"""
API errors raised by catalog and order services.
DRF's exception handler renders them as {"detail": ...} with the status code.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class InvalidInput(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


class AttributeValidationFailed(InvalidInput):
    """Standardized attribute values that are not in the allowed list."""
    default_code = 'attribute_validation_failed'

    def __init__(self, errors, prefix='Attribute validation errors'):
        self.errors = errors
        messages = '; '.join(err['error'] for err in errors)
        super().__init__(f"{prefix}: {messages}")


class EntityNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class EntityConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict.'
    default_code = 'conflict'


class StorageFailure(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Storage operation failed.'
    default_code = 'storage_failure'

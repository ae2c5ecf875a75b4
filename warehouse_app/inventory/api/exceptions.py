import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from ..exceptions import InventoryError, NotFoundError

logger = logging.getLogger(__name__)

# a missing reference inside a request body is a bad request, not a missing URL
BODY_METHODS = ('POST', 'PUT', 'PATCH')


def inventory_exception_handler(exc, context):
    """Render inventory errors as {message, code} and hide unexpected failures"""
    if isinstance(exc, InventoryError):
        status_code = exc.status_code
        request = context.get('request')
        if isinstance(exc, NotFoundError) and request is not None and request.method in BODY_METHODS:
            status_code = status.HTTP_400_BAD_REQUEST

        set_rollback()
        return Response(exc.as_dict(), status=status_code)

    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get('view')
    logger.exception(f"[API] Unhandled error in {view.__class__.__name__ if view else 'unknown view'}")
    set_rollback()
    return Response(
        {'message': 'Internal server error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

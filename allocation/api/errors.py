from rest_framework import status
from rest_framework.response import Response

from allocation.core.types import AllocationError

ERROR_STATUS_CODES = {
    AllocationError.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AllocationError.VENDOR_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AllocationError.ALREADY_ASSIGNED: status.HTTP_409_CONFLICT,
    AllocationError.INVALID_ORDER_STATE: status.HTTP_409_CONFLICT,
    AllocationError.NO_VENDORS_AVAILABLE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AllocationError.NO_STOCK_AVAILABLE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AllocationError.NO_VENDORS_IN_AREA: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AllocationError.INVALID_LOCATION: status.HTTP_400_BAD_REQUEST,
    AllocationError.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error: AllocationError, **extra) -> Response:
    body = {"error": error.value, "message": error.message, "retryable": error.is_retryable}
    body.update(extra)
    return Response(body, status=ERROR_STATUS_CODES[error])

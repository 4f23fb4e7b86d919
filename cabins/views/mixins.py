"""
View mixins and JSON helpers: LocationMixin, request parsing, error mapping.
"""

import json
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from cabins.exceptions import (
    CabinDataError, EmptySelection, InvalidPrice, InvalidSlotKey, NoApplicableDates, SlotUnavailable,
)
from cabins.models import Cabin, Location

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidSlotKey: 400,
    InvalidPrice: 400,
    EmptySelection: 400,
    NoApplicableDates: 422,
    SlotUnavailable: 409,
    CabinDataError: 500,
}


def get_location(location_code):
    """Active location by code, or 404."""
    return get_object_or_404(Location.objects.filter(is_active=True), code=location_code)


def get_cabin(location, cabin_id):
    """Cabin of a location, or 404."""
    return get_object_or_404(Cabin.objects.select_related('location'), pk=cabin_id, location=location)


class LocationMixin:
    """Mixin to get the active location from the ``location_code`` URL kwarg."""

    def get_location(self):
        return get_location(self.kwargs.get('location_code'))


def parse_request_data(request):
    """
    Body of a POST request as a dict.

    JSON bodies are decoded; form posts fall back to request.POST.

    Raises:
        InvalidSlotKey: malformed JSON body
    """
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except (ValueError, UnicodeDecodeError):
            raise InvalidSlotKey("Request body is not valid JSON") from None
        if not isinstance(data, dict):
            raise InvalidSlotKey("Request body must be a JSON object")
        return data
    return {
        key: values if len(values) > 1 else values[0]
        for key, values in request.POST.lists()
    }


def error_response(message, status=400, **extra):
    """Return error JSON response."""
    return JsonResponse(dict({'success': False, 'error': message}, **extra), status=status)


def success_response(data=None, message=None):
    """Return success JSON response."""
    response = {'success': True}
    if message:
        response['message'] = message
    if data:
        response.update(data)
    return JsonResponse(response)


def engine_error_response(exc):
    """Translate an availability engine error into its JSON error response."""
    status = next(
        (code for exc_type, code in ERROR_STATUS.items() if isinstance(exc, exc_type)),
        400,
    )
    extra = {}
    if isinstance(exc, NoApplicableDates):
        extra['skipped_past_dates'] = [d.isoformat() for d in exc.skipped_past_dates]
    if isinstance(exc, SlotUnavailable):
        extra['slot'] = exc.slot.as_dict()
    if status >= 500:
        logger.error("Engine failure: %s", exc)
    else:
        logger.info("Rejected request: %s", exc)
    return error_response(str(exc), status=status, **extra)

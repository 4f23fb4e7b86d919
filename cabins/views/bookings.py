"""
Booking views: quote and create.
"""

import logging

from django.views.decorators.http import require_POST

from cabins.exceptions import AvailabilityError, InvalidSlotKey
from cabins.services import BookingService

from .mixins import (
    engine_error_response, error_response, get_cabin, get_location,
    parse_request_data, success_response,
)

logger = logging.getLogger(__name__)


def _selections_from(data):
    """
    Read the selection from a request body.

    Accepts ``{"selections": {"2026-03-04": ["morning"]}}`` or
    ``{"selections": [{"date": "2026-03-04", "shift": "morning"}]}``.
    """
    selections = data.get('selections')
    if selections is None:
        return {}
    if isinstance(selections, dict):
        return {
            day: [shifts] if isinstance(shifts, str) else list(shifts or [])
            for day, shifts in selections.items()
        }
    if isinstance(selections, list):
        pairs = []
        for item in selections:
            if not isinstance(item, dict) or 'date' not in item or 'shift' not in item:
                raise InvalidSlotKey("Each selection needs a date and a shift")
            pairs.append((item['date'], item['shift']))
        return pairs
    raise InvalidSlotKey("selections must be an object or a list")


@require_POST
def booking_quote_ajax(request, location_code, cabin_id):
    """
    AJAX endpoint pricing a multi-slot selection.

    URL: /locations/{code}/cabins/{id}/api/booking-quote/

    Returns resolved slot prices, subtotal, service fee and total.
    """
    location = get_location(location_code)
    cabin = get_cabin(location, cabin_id)
    try:
        quote = BookingService(cabin).quote(_selections_from(parse_request_data(request)))
    except AvailabilityError as e:
        return engine_error_response(e)
    return success_response(quote.as_dict())


@require_POST
def create_bookings_ajax(request, location_code, cabin_id):
    """
    AJAX endpoint booking a multi-slot selection.

    URL: /locations/{code}/cabins/{id}/api/bookings/

    Body (JSON): {"selections": {...}, "professional_name": "Ana"}
    """
    location = get_location(location_code)
    cabin = get_cabin(location, cabin_id)
    try:
        data = parse_request_data(request)
        created, quote = BookingService(cabin).create_bookings(
            _selections_from(data),
            professional_name=(data.get('professional_name') or '').strip(),
        )
    except AvailabilityError as e:
        return engine_error_response(e)
    except Exception:
        logger.exception("Booking creation error for cabin %s", cabin.pk)
        return error_response('Unexpected error while creating bookings', status=500)

    return success_response({
        'bookings': [
            {'id': b.pk, 'date': b.date.isoformat(), 'shift': b.shift, 'price': str(b.price)}
            for b in created
        ],
        'quote': quote.as_dict(),
    }, message=f"{len(created)} booking(s) confirmed")

"""
Pricing views: nominal rate lookup and batch price edits.
"""

import logging
from decimal import Decimal

from django.views.decorators.http import require_GET, require_POST

from cabins import conf
from cabins.exceptions import AvailabilityError, InvalidSlotKey
from cabins.services import apply_batch, catalog, resolve_nominal, resolve_target_dates, save_batch_result

from .mixins import (
    engine_error_response, error_response, get_cabin, get_location,
    parse_request_data, success_response,
)

logger = logging.getLogger(__name__)


@require_GET
def nominal_rate_ajax(request, location_code, cabin_id):
    """
    AJAX endpoint for the nominal price and availability of one slot.

    URL: /locations/{code}/cabins/{id}/api/nominal-rate/?date=2026-03-04&shift=morning

    Ignores bookings and the clock; use the slots endpoint for final status.
    """
    location = get_location(location_code)
    cabin = get_cabin(location, cabin_id)

    day = request.GET.get('date')
    shift = request.GET.get('shift')
    if not day or not shift:
        return error_response('date and shift are required')

    try:
        nominal = resolve_nominal(
            catalog.get_cabin(cabin), day, shift,
            fallback_price=Decimal(str(conf.get_setting('FALLBACK_PRICE'))),
        )
    except AvailabilityError as e:
        return engine_error_response(e)

    return success_response({
        'cabin_id': cabin.pk,
        'date': day,
        'shift': shift,
        'price': str(nominal.price),
        'available': nominal.available,
    })


@require_POST
def batch_pricing_ajax(request, location_code, cabin_id):
    """
    AJAX endpoint applying one price to many dates and shifts.

    URL: /locations/{code}/cabins/{id}/api/batch-pricing/

    Body (JSON):
        mode: 'dates' | 'month' | 'weekdays' (default 'dates')
        dates: ['2026-03-04', ...]          (mode 'dates')
        year, month                         (mode 'month')
        weekdays: ['mon', 'fri'] or [1, 5]  (mode 'weekdays', current month)
        shifts: ['morning', 'evening']
        price: 180

    Past dates are skipped and reported; a request with only past dates
    is rejected with 422 and changes nothing.
    """
    location = get_location(location_code)
    cabin = get_cabin(location, cabin_id)

    try:
        data = parse_request_data(request)
        today = catalog.get_today()
        shifts = data.get('shifts') or []
        if isinstance(shifts, str):
            shifts = [shifts]
        dates = data.get('dates') or []
        if isinstance(dates, str):
            dates = [dates]
        weekdays = data.get('weekdays') or []
        if isinstance(weekdays, str):
            weekdays = [weekdays]

        target_dates = resolve_target_dates(
            data.get('mode') or 'dates',
            today,
            dates=dates,
            year=data.get('year'),
            month=data.get('month'),
            weekdays=weekdays,
        )
        if not target_dates:
            raise InvalidSlotKey("At least one date must be selected")

        result = apply_batch(catalog.get_cabin(cabin), target_dates, shifts, data.get('price'), today)
        written = save_batch_result(cabin, result)
    except AvailabilityError as e:
        return engine_error_response(e)
    except Exception:
        logger.exception("Batch pricing error for cabin %s", cabin.pk)
        return error_response('Unexpected error while saving prices', status=500)

    message = f"Price updated for {written} slot(s)"
    if result.skipped_past_dates:
        message += f"; {len(result.skipped_past_dates)} past date(s) skipped"
    return success_response(result.as_dict(), message=message)

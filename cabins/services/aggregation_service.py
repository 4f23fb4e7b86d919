"""
Location Aggregator
===================

Folds per-cabin slot resolutions into per-location summaries:

    {date: {Shift: AggregateDayShift}}

Dates are visited ascending and shifts morning → afternoon → evening so the
output is reproducible. A cabin whose data is malformed is skipped (and logged)
instead of failing the whole location.

``LocationAvailabilityService`` is the boundary class: it fetches cabins and
bookings through the catalog, builds the window and returns JSON-ready data.
"""

import logging
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from cabins import conf
from cabins.exceptions import CabinDataError
from cabins.services import catalog
from cabins.services.calendar_window import date_range, generate_window, parse_date_key
from cabins.services.pricing_service import PLATFORM_FALLBACK_PRICE, quantize_price
from cabins.services.report_service import find_unsold_slots
from cabins.services.slot_service import (
    as_index, build_cabin_calendar, confirmed_only, resolve_slot, statuses_policy,
)
from cabins.services.snapshots import SHIFTS, AggregateDayShift, SlotStatus

logger = logging.getLogger(__name__)


def _resolve_cabin(cabin, window, index, today, fallback_price):
    """Resolve every (date, shift) of one cabin; raises CabinDataError as a whole."""
    return {
        (day, shift): resolve_slot(cabin, day, shift, index, today, fallback_price=fallback_price)
        for day in window
        for shift in SHIFTS
    }


def aggregate_location(cabins, confirmed_bookings, window, today,
                       blocks_slot=confirmed_only, fallback_price=PLATFORM_FALLBACK_PRICE):
    """
    Aggregate slot states of every cabin at a location.

    Args:
        cabins: iterable of CabinSnapshot (all cabins of the location)
        confirmed_bookings: BookedSlotIndex or iterable of booking snapshots
        window: dates to evaluate
        today: injected current date

    Returns:
        OrderedDict {date: OrderedDict {Shift: AggregateDayShift}}
    """
    window = sorted({parse_date_key(d) for d in window})
    index = as_index(confirmed_bookings, blocks_slot)

    resolved = []
    unresolved = 0
    for cabin in cabins:
        try:
            resolved.append(_resolve_cabin(cabin, window, index, today, fallback_price))
        except CabinDataError as e:
            unresolved += 1
            logger.warning("Skipping cabin %s in location aggregate: %s", cabin.id, e)

    result = OrderedDict()
    for day in window:
        shifts = OrderedDict()
        for shift in SHIFTS:
            summary = AggregateDayShift(unresolved_cabins=unresolved)
            price_total = Decimal('0.00')
            for slots in resolved:
                slot = slots[(day, shift)]
                summary.total_cabins += 1
                if slot.status == SlotStatus.AVAILABLE:
                    summary.available_cabins += 1
                    price_total += slot.price
                elif slot.status == SlotStatus.MANUALLY_CLOSED:
                    summary.manually_closed_count += 1
                elif slot.status == SlotStatus.BOOKED:
                    summary.booked_cabins += 1
            if summary.available_cabins > 0:
                summary.average_price = quantize_price(price_total / summary.available_cabins)
            shifts[shift] = summary
        result[day] = shifts
    return result


def summary_as_dict(aggregate):
    """JSON-ready form of an aggregate_location() result."""
    return [
        {
            'date': day.isoformat(),
            'shifts': {shift.value: data.as_dict() for shift, data in shifts.items()},
        }
        for day, shifts in aggregate.items()
    ]


class LocationAvailabilityService:
    """
    Availability read model for one location.

    Usage:
        service = LocationAvailabilityService(location, today=date(2026, 3, 2))
        summary = service.weekly_summary()
        cells = service.cabin_calendar(cabin)
    """

    def __init__(self, location, today=None):
        """
        Args:
            location: Location instance
            today: injected current date (defaults to the catalog clock)
        """
        self.location = location
        self.opened_on = timezone.localdate(location.created_at) if location.created_at else None
        self.today = parse_date_key(today) if today is not None else catalog.get_today()
        self.window_length = int(conf.get_setting('WINDOW_LENGTH'))
        self.fallback_price = Decimal(str(conf.get_setting('FALLBACK_PRICE')))
        self.blocking_statuses = list(conf.get_setting('BLOCKING_BOOKING_STATUSES'))
        self.blocks_slot = statuses_policy(self.blocking_statuses)

    def get_window(self, anchor=None, not_before=None):
        anchor = parse_date_key(anchor) if anchor else self.today
        return generate_window(anchor, self.window_length, not_before=not_before)

    def _bookings_for(self, cabin_ids, window):
        if not window or not cabin_ids:
            return as_index(())
        bookings = catalog.get_confirmed_bookings(
            cabin_ids, (window[0], window[-1]), statuses=self.blocking_statuses
        )
        return as_index(bookings, self.blocks_slot)

    def weekly_summary(self, anchor=None):
        """
        Location summary for the week containing ``anchor``.

        Dates before the location was created are left out.

        Returns:
            dict with location info, window and per-day shift aggregates
        """
        window = self.get_window(anchor, not_before=self.opened_on)
        cabins = catalog.get_cabins_for_location(self.location.pk)
        index = self._bookings_for([c.id for c in cabins], window)

        aggregate = aggregate_location(
            cabins, index, window, self.today, fallback_price=self.fallback_price
        )

        return {
            'location': {
                'id': self.location.pk,
                'name': self.location.name,
                'code': self.location.code,
            },
            'today': self.today.isoformat(),
            'window': [d.isoformat() for d in window],
            'cabins': len(cabins),
            'days': summary_as_dict(aggregate),
        }

    def cabin_calendar(self, cabin, anchor=None):
        """
        Slot cells of one cabin for the week containing ``anchor``.

        Args:
            cabin: CabinSnapshot belonging to this location
        """
        window = self.get_window(anchor, not_before=cabin.created_on)
        index = self._bookings_for([cabin.id], window)
        return {
            'cabin': {'id': cabin.id, 'name': cabin.name},
            'today': self.today.isoformat(),
            'window': [d.isoformat() for d in window],
            'days': build_cabin_calendar(
                cabin, window, index, self.today, fallback_price=self.fallback_price
            ),
        }

    def unsold_slots(self, start=None, end=None):
        """
        Unsold past slots of every cabin between ``start`` and ``end``.

        Defaults to the ``WINDOW_LENGTH`` days ending yesterday.
        """
        yesterday = self.today - timedelta(days=1)
        end = parse_date_key(end) if end else yesterday
        start = parse_date_key(start) if start else end - timedelta(days=self.window_length - 1)
        window = date_range(start, end)

        cabins = catalog.get_cabins_for_location(self.location.pk)
        index = self._bookings_for([c.id for c in cabins], window)
        report = find_unsold_slots(
            cabins, index, window, self.today, fallback_price=self.fallback_price
        )

        return {
            'location': {
                'id': self.location.pk,
                'name': self.location.name,
                'code': self.location.code,
            },
            'start': start.isoformat(),
            'end': end.isoformat(),
            'cabins': [
                {
                    'id': cabin_id,
                    'name': data['name'],
                    'lost_slots': [
                        dict(slot, price=str(slot['price'])) for slot in data['lost_slots']
                    ],
                    'lost_revenue': str(data['lost_revenue']),
                }
                for cabin_id, data in report.items()
            ],
            'total_lost_revenue': str(sum(
                (data['lost_revenue'] for data in report.values()), Decimal('0.00')
            )),
        }

"""
Slot Status Resolver
====================

Turns a nominal rate into the final status an end user sees.

Evaluation order is fixed, first match wins:
1. PAST_UNAVAILABLE  - date before the start of today
2. MANUALLY_CLOSED   - nominal availability is False
3. BOOKED            - a blocking booking exists for (cabin, date, shift)
4. AVAILABLE         - carries the nominal price

Which bookings block a slot is decided by a single predicate
(``confirmed_only`` by default) so the policy can be swapped without touching
the resolver.
"""

import logging
from datetime import datetime

from cabins.exceptions import CabinDataError
from cabins.services.calendar_window import parse_date_key
from cabins.services.pricing_service import PLATFORM_FALLBACK_PRICE, resolve_nominal
from cabins.services.snapshots import (
    SHIFTS, BookingStatus, ResolvedSlot, SlotStatus, parse_shift,
)

logger = logging.getLogger(__name__)


# =============================================================================
# BOOKING POLICY
# =============================================================================

def confirmed_only(booking):
    """Only confirmed bookings take a slot off the market."""
    return booking.status == BookingStatus.CONFIRMED.value


def statuses_policy(statuses):
    """
    Build a blocking predicate from a set of booking statuses.

    Example:
        statuses_policy(['confirmed', 'pending'])  # pending as a soft hold
    """
    blocking = {str(getattr(s, 'value', s)) for s in statuses}

    def blocks_slot(booking):
        return booking.status in blocking

    return blocks_slot


class BookedSlotIndex:
    """Set of (cabin_id, date, shift) keys taken by blocking bookings."""

    def __init__(self, keys=()):
        self._keys = set(keys)

    @classmethod
    def from_bookings(cls, bookings, blocks_slot=confirmed_only):
        keys = set()
        for booking in bookings:
            if not blocks_slot(booking):
                continue
            keys.add((
                booking.cabin_id,
                parse_date_key(booking.date),
                parse_shift(booking.shift),
            ))
        return cls(keys)

    def __contains__(self, key):
        return key in self._keys

    def __len__(self):
        return len(self._keys)


def as_index(bookings, blocks_slot=confirmed_only):
    if isinstance(bookings, BookedSlotIndex):
        return bookings
    return BookedSlotIndex.from_bookings(bookings or (), blocks_slot=blocks_slot)


def start_of_day(today):
    if isinstance(today, datetime):
        return today.date()
    return parse_date_key(today)


# =============================================================================
# RESOLUTION
# =============================================================================

def resolve_slot(cabin, day, shift, confirmed_bookings, today,
                 blocks_slot=confirmed_only, fallback_price=PLATFORM_FALLBACK_PRICE):
    """
    Resolve the final status and price of one slot.

    Args:
        cabin: CabinSnapshot
        day: date or ``YYYY-MM-DD`` string
        shift: Shift or shift name
        confirmed_bookings: BookedSlotIndex or iterable of booking snapshots
        today: the injected current date
        blocks_slot: booking policy predicate (ignored for a prebuilt index)
        fallback_price: platform fallback price

    Returns:
        ResolvedSlot

    Raises:
        InvalidSlotKey: malformed date or shift
        CabinDataError: malformed cabin data
    """
    day = parse_date_key(day)
    shift = parse_shift(shift)

    if day < start_of_day(today):
        return ResolvedSlot(cabin.id, day, shift, None, SlotStatus.PAST_UNAVAILABLE)

    nominal = resolve_nominal(cabin, day, shift, fallback_price=fallback_price)
    if not nominal.available:
        return ResolvedSlot(cabin.id, day, shift, nominal.price, SlotStatus.MANUALLY_CLOSED)

    index = as_index(confirmed_bookings, blocks_slot)
    if (cabin.id, day, shift) in index:
        return ResolvedSlot(cabin.id, day, shift, None, SlotStatus.BOOKED)

    return ResolvedSlot(cabin.id, day, shift, nominal.price, SlotStatus.AVAILABLE)


def build_cabin_calendar(cabin, window, bookings, today,
                         blocks_slot=confirmed_only, fallback_price=PLATFORM_FALLBACK_PRICE):
    """
    Build the per-day, per-shift cells shown in a cabin's calendar.

    A cabin whose stored data cannot be resolved renders every cell as
    ``unknown`` and not bookable.

    Returns:
        list of {'date': 'YYYY-MM-DD', 'shifts': {shift: cell}}
    """
    index = as_index(bookings, blocks_slot)
    days = []
    for day in window:
        day = parse_date_key(day)
        cells = {}
        for shift in SHIFTS:
            try:
                slot = resolve_slot(cabin, day, shift, index, today, fallback_price=fallback_price)
                cells[shift.value] = slot.as_dict()
            except CabinDataError as e:
                logger.warning("Unresolvable slot %s %s: %s", day, shift.value, e)
                cells[shift.value] = {
                    'cabin_id': cabin.id,
                    'date': day.isoformat(),
                    'shift': shift.value,
                    'price': None,
                    'status': 'unknown',
                    'bookable': False,
                }
        days.append({'date': day.isoformat(), 'shifts': cells})
    return days

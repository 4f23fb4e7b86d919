"""
Booking quote and creation.

Quote Flow:
1. Resolve every selected (date, shift) with the slot resolver
2. Reject the whole selection if any slot is not AVAILABLE
3. Subtotal = sum of resolved slot prices
4. Service fee = subtotal × fee percent (0 when nothing is selected)
5. Total = subtotal + service fee
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from django.db import IntegrityError, transaction

from cabins import conf
from cabins.exceptions import EmptySelection, SlotUnavailable
from cabins.services import catalog
from cabins.services.calendar_window import parse_date_key
from cabins.services.pricing_service import PLATFORM_FALLBACK_PRICE, quantize_price
from cabins.services.slot_service import as_index, resolve_slot, statuses_policy
from cabins.services.snapshots import SHIFTS, ResolvedSlot, SlotStatus, parse_shift

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_FEE_PERCENT = Decimal('10.00')


@dataclass(frozen=True)
class BookingQuote:
    slots: List[ResolvedSlot]
    subtotal: Decimal
    service_fee_percent: Decimal
    service_fee: Decimal
    total: Decimal

    def as_dict(self):
        return {
            'slots': [slot.as_dict() for slot in self.slots],
            'subtotal': str(self.subtotal),
            'service_fee_percent': str(self.service_fee_percent),
            'service_fee': str(self.service_fee),
            'total': str(self.total),
        }


def normalize_selection(selections):
    """
    Normalize a selection to sorted, de-duplicated (date, Shift) pairs.

    Accepts either a mapping ``{date: [shift, ...]}`` or an iterable of
    ``(date, shift)`` pairs.
    """
    if hasattr(selections, 'items'):
        pairs = [(day, shift) for day, shifts in selections.items() for shift in shifts]
    else:
        pairs = list(selections or ())
    keys = {(parse_date_key(day), parse_shift(shift)) for day, shift in pairs}
    return sorted(keys, key=lambda k: (k[0], SHIFTS.index(k[1])))


def quote_booking(cabin, selections, bookings, today,
                  service_fee_percent=DEFAULT_SERVICE_FEE_PERCENT,
                  fallback_price=PLATFORM_FALLBACK_PRICE):
    """
    Price a multi-slot selection for one cabin.

    Raises:
        EmptySelection: nothing selected
        SlotUnavailable: a selected slot is past, closed or booked
    """
    keys = normalize_selection(selections)
    if not keys:
        raise EmptySelection("Select at least one shift to book")

    index = as_index(bookings)
    slots = []
    for day, shift in keys:
        slot = resolve_slot(cabin, day, shift, index, today, fallback_price=fallback_price)
        if slot.status != SlotStatus.AVAILABLE:
            raise SlotUnavailable(slot)
        slots.append(slot)

    subtotal = quantize_price(sum((s.price for s in slots), Decimal('0.00')))
    fee_percent = Decimal(str(service_fee_percent))
    service_fee = quantize_price(subtotal * fee_percent / Decimal('100'))
    return BookingQuote(
        slots=slots,
        subtotal=subtotal,
        service_fee_percent=fee_percent,
        service_fee=service_fee,
        total=quantize_price(subtotal + service_fee),
    )


class BookingService:
    """
    Booking workflow for one cabin.

    Usage:
        service = BookingService(cabin, today=date(2026, 3, 2))
        quote = service.quote({'2026-03-03': ['morning', 'evening']})
        bookings = service.create_bookings(selection, professional_name='Ana')
    """

    def __init__(self, cabin, today=None):
        self.cabin = cabin
        self.today = parse_date_key(today) if today is not None else catalog.get_today()
        self.service_fee_percent = Decimal(str(conf.get_setting('SERVICE_FEE_PERCENT')))
        self.fallback_price = Decimal(str(conf.get_setting('FALLBACK_PRICE')))
        self.blocking_statuses = list(conf.get_setting('BLOCKING_BOOKING_STATUSES'))

    def _current_state(self, keys):
        snapshot = catalog.get_cabin(self.cabin)
        days = [day for day, _ in keys]
        bookings = catalog.get_confirmed_bookings(
            [self.cabin.pk], (min(days), max(days)), statuses=self.blocking_statuses
        ) if days else []
        return snapshot, as_index(bookings, statuses_policy(self.blocking_statuses))

    def quote(self, selections):
        keys = normalize_selection(selections)
        snapshot, index = self._current_state(keys)
        return quote_booking(
            snapshot, keys, index, self.today,
            service_fee_percent=self.service_fee_percent,
            fallback_price=self.fallback_price,
        )

    def create_bookings(self, selections, professional_name='', status='confirmed'):
        """
        Re-resolve the selection against the store and write the bookings.

        The whole selection is written in one transaction; a concurrent
        confirmation of the same slot trips the unique constraint and is
        reported as SlotUnavailable.

        Returns:
            (list of Booking, BookingQuote)
        """
        from cabins.models import Booking

        quote = self.quote(selections)
        created = []
        try:
            with transaction.atomic():
                for slot in quote.slots:
                    created.append(Booking.objects.create(
                        cabin=self.cabin,
                        professional_name=professional_name,
                        date=slot.date,
                        shift=slot.shift.value,
                        status=status,
                        price=slot.price,
                    ))
        except IntegrityError:
            logger.warning("Concurrent booking detected for cabin %s", self.cabin.pk)
            taken = next(iter(quote.slots))
            raise SlotUnavailable(
                ResolvedSlot(taken.cabin_id, taken.date, taken.shift, None, SlotStatus.BOOKED),
                "One of the selected shifts was booked by someone else",
            ) from None

        logger.info(
            "Created %d bookings for cabin %s (total %s)",
            len(created), self.cabin.pk, quote.total,
        )
        return created, quote

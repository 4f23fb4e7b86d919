"""
Catalog and booking collaborators.

The only place the engine's inputs are read from the database. Everything
returned here is a snapshot; the resolvers never see model instances.
"""

import logging

from django.db.models import Prefetch
from django.utils import timezone

from cabins import conf
from cabins.exceptions import InvalidSlotKey
from cabins.services.calendar_window import parse_date_key
from cabins.services.snapshots import (
    booking_snapshot_from_model, cabin_snapshot_from_model,
)

logger = logging.getLogger(__name__)


def get_today():
    """Current date in the configured local timezone."""
    return timezone.localdate()


def get_cabins_for_location(location_id):
    """
    All cabins of a location as snapshots, with their override rows.

    Returns:
        list of CabinSnapshot ordered by sort_order, name
    """
    from cabins.models import Cabin, CabinDateOverride

    cabins = Cabin.objects.filter(
        location_id=location_id
    ).prefetch_related(
        Prefetch('date_overrides', queryset=CabinDateOverride.objects.order_by('date', 'shift'))
    ).order_by('sort_order', 'name')

    return [cabin_snapshot_from_model(cabin) for cabin in cabins]


def get_cabin(cabin):
    """Snapshot of a single Cabin instance, reloading its overrides."""
    return cabin_snapshot_from_model(cabin, overrides=list(cabin.date_overrides.all()))


def get_confirmed_bookings(cabin_ids, date_range, statuses=None):
    """
    Bookings that take slots off the market.

    Args:
        cabin_ids: iterable of cabin primary keys
        date_range: (start, end) inclusive
        statuses: blocking statuses (defaults to BLOCKING_BOOKING_STATUSES)

    Returns:
        list of BookingSnapshot
    """
    from cabins.models import Booking

    if statuses is None:
        statuses = conf.get_setting('BLOCKING_BOOKING_STATUSES')
    start, end = (parse_date_key(d) for d in date_range)

    bookings = Booking.objects.filter(
        cabin_id__in=list(cabin_ids),
        status__in=list(statuses),
        date__gte=start,
        date__lte=end,
    ).order_by('date', 'shift')

    snapshots = []
    for booking in bookings:
        try:
            snapshots.append(booking_snapshot_from_model(booking))
        except InvalidSlotKey as e:
            # A booking on a shift that does not exist cannot block any slot
            logger.warning("Ignoring booking %s: %s", booking.pk, e)
    return snapshots

"""
Unsold slot report.

Lists, per cabin, past slots that were open for sale but never booked, and
the revenue those slots would have brought at their nominal price.
"""

import logging
from decimal import Decimal

from cabins.exceptions import CabinDataError
from cabins.services.calendar_window import parse_date_key
from cabins.services.pricing_service import PLATFORM_FALLBACK_PRICE, resolve_nominal
from cabins.services.slot_service import as_index, confirmed_only, start_of_day
from cabins.services.snapshots import SHIFTS

logger = logging.getLogger(__name__)


def find_unsold_slots(cabins, bookings, window, today,
                      blocks_slot=confirmed_only, fallback_price=PLATFORM_FALLBACK_PRICE):
    """
    Collect unsold past slots.

    Only dates strictly before ``today`` are considered, and dates before a
    cabin's creation date are ignored for that cabin.

    Returns:
        dict {cabin_id: {'name', 'lost_slots': [...], 'lost_revenue': Decimal}}
    """
    index = as_index(bookings, blocks_slot)
    today = start_of_day(today)
    days = sorted({parse_date_key(d) for d in window})
    days = [d for d in days if d < today]

    report = {}
    for cabin in cabins:
        lost = []
        try:
            for day in days:
                if cabin.created_on and day < cabin.created_on:
                    continue
                for shift in SHIFTS:
                    nominal = resolve_nominal(cabin, day, shift, fallback_price=fallback_price)
                    if nominal.available and (cabin.id, day, shift) not in index:
                        lost.append({
                            'date': day.isoformat(),
                            'shift': shift.value,
                            'price': nominal.price,
                        })
        except CabinDataError as e:
            logger.warning("Skipping cabin %s in unsold slot report: %s", cabin.id, e)
            continue

        report[cabin.id] = {
            'name': cabin.name,
            'lost_slots': lost,
            'lost_revenue': sum((slot['price'] for slot in lost), Decimal('0.00')),
        }
    return report

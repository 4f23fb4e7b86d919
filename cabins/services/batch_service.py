"""
Batch Override Editor
=====================

Writes one uniform price into the override layer across a set of dates and
shifts.

Rules:
- The price must be a finite number greater than zero.
- Past dates are reported in ``skipped_past_dates`` and never written.
- An existing (date, shift) entry only has its price changed.
- A new entry inherits the shift's currently resolved availability, so a
  price edit never reopens a shift the owner closed (or closes an open one).
- If nothing is left after dropping past dates, the call fails with
  NoApplicableDates and changes nothing.

The editor returns a new snapshot; persisting it is the caller's job
(``save_batch_result`` does that for Cabin rows).
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import List, Tuple

from django.db import transaction

from cabins.exceptions import InvalidPrice, InvalidSlotKey, NoApplicableDates
from cabins.services.calendar_window import (
    month_dates, parse_date_key, weekday_dates_in_month,
)
from cabins.services.pricing_service import MAX_PRICE, quantize_price, resolve_nominal
from cabins.services.slot_service import start_of_day
from cabins.services.snapshots import SHIFTS, CabinSnapshot, OverrideEntry, Shift, parse_shift

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    updated_cabin: CabinSnapshot
    applied_dates: List
    skipped_past_dates: List
    shifts: Tuple[Shift, ...]
    price: Decimal

    @property
    def touched_keys(self):
        return [(day, shift) for day in self.applied_dates for shift in self.shifts]

    def as_dict(self):
        return {
            'applied_dates': [d.isoformat() for d in self.applied_dates],
            'skipped_past_dates': [d.isoformat() for d in self.skipped_past_dates],
            'shifts': [s.value for s in self.shifts],
            'price': str(self.price),
            'updated_slots': len(self.touched_keys),
        }


# =============================================================================
# INPUT VALIDATION
# =============================================================================

def validate_price(price):
    """
    Parse a batch price.

    Raises:
        InvalidPrice: for booleans, non-numeric, non-finite, non-positive
            or over MAX_PRICE values
    """
    if price is None or isinstance(price, bool):
        raise InvalidPrice(f"Invalid price: {price!r}")
    try:
        value = Decimal(str(price).strip())
    except (InvalidOperation, ValueError):
        raise InvalidPrice(f"Invalid price: {price!r}") from None
    if not value.is_finite() or value > MAX_PRICE:
        raise InvalidPrice(f"Price must be a finite number up to {MAX_PRICE}: {price!r}")
    if quantize_price(value) <= 0:
        raise InvalidPrice(f"Price must be a finite number greater than zero: {price!r}")
    return quantize_price(value)


def validate_shifts(target_shifts):
    """Parse a non-empty shift selection, returned in canonical order."""
    if isinstance(target_shifts, (str, Shift)):
        target_shifts = [target_shifts]
    selected = {parse_shift(s) for s in (target_shifts or ())}
    if not selected:
        raise InvalidSlotKey("At least one shift must be selected")
    return tuple(s for s in SHIFTS if s in selected)


# =============================================================================
# TARGET DATE BUILDERS
# =============================================================================

def explicit_dates(dates):
    return [parse_date_key(d) for d in dates]


def resolve_target_dates(mode, today, dates=None, year=None, month=None, weekdays=None):
    """
    Build the target date set for a batch edit.

    Args:
        mode: 'dates' (explicit list), 'month' (every day of year/month) or
              'weekdays' (days of the current month on the given weekdays)
        today: injected current date
    """
    if mode == 'dates':
        return explicit_dates(dates or [])
    if mode == 'month':
        return month_dates(year, month)
    if mode == 'weekdays':
        if not weekdays:
            raise InvalidSlotKey("At least one weekday must be selected")
        return weekday_dates_in_month(weekdays, today)
    raise InvalidSlotKey(f"Unknown target mode: {mode!r}")


# =============================================================================
# BATCH APPLICATION
# =============================================================================

def apply_batch(cabin, target_dates, target_shifts, price, today):
    """
    Apply one price to every (future date, shift) pair.

    Args:
        cabin: CabinSnapshot
        target_dates: iterable of dates or ``YYYY-MM-DD`` strings
        target_shifts: non-empty iterable of shifts
        price: new price (> 0)
        today: injected current date

    Returns:
        BatchResult

    Raises:
        InvalidPrice, InvalidSlotKey, NoApplicableDates
    """
    new_price = validate_price(price)
    shifts = validate_shifts(target_shifts)
    dates = sorted({parse_date_key(d) for d in target_dates})
    today = start_of_day(today)

    skipped = [d for d in dates if d < today]
    applicable = [d for d in dates if d >= today]

    if not applicable:
        raise NoApplicableDates(
            "All selected dates are in the past; no prices were changed",
            skipped_past_dates=skipped,
        )

    overrides = dict(cabin.overrides)
    for day in applicable:
        for shift in shifts:
            existing = overrides.get((day, shift))
            if existing is not None:
                overrides[(day, shift)] = replace(existing, price=new_price)
            else:
                nominal = resolve_nominal(cabin, day, shift)
                overrides[(day, shift)] = OverrideEntry(price=new_price, available=nominal.available)

    logger.info(
        "Batch price %s applied to cabin %s: %d dates x %d shifts, %d past dates skipped",
        new_price, cabin.id, len(applicable), len(shifts), len(skipped),
    )

    return BatchResult(
        updated_cabin=replace(cabin, overrides=overrides),
        applied_dates=applicable,
        skipped_past_dates=skipped,
        shifts=shifts,
        price=new_price,
    )


def save_batch_result(cabin, result):
    """
    Persist the touched override rows of a batch result.

    Args:
        cabin: Cabin model instance the batch was computed for
        result: BatchResult from apply_batch()

    Returns:
        int: number of rows written
    """
    from cabins.models import CabinDateOverride

    written = 0
    with transaction.atomic():
        for day, shift in result.touched_keys:
            entry = result.updated_cabin.overrides[(day, shift)]
            CabinDateOverride.objects.update_or_create(
                cabin=cabin,
                date=day,
                shift=shift.value,
                defaults={'price': entry.price, 'available': entry.available},
            )
            written += 1
    return written

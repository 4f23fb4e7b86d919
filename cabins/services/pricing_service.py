"""
Pricing Override Resolver
=========================

Resolves the nominal price and availability flag of one (cabin, date, shift)
before time and bookings are taken into account.

Precedence (highest first):
1. Override ``available is False``  → shift closed for that date
2. Otherwise                        → cabin base availability for the shift
3. Price: override price → weekday default price → cabin flat price → fallback

A price of 0, a negative number, a boolean, anything non-numeric or anything
above MAX_PRICE counts as "not set" and falls through to the next layer; it is
never read as "free".
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from collections.abc import Mapping

from cabins.exceptions import CabinDataError
from cabins.services.calendar_window import parse_date_key, weekday_index
from cabins.services.snapshots import NominalRate, parse_shift

PLATFORM_FALLBACK_PRICE = Decimal('100.00')

CENT = Decimal('0.01')

# Largest amount the price columns (max_digits=10, decimal_places=2) can store
MAX_PRICE = Decimal('99999999.99')


def quantize_price(value):
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def positive_price(value):
    """
    Return ``value`` as a cent-quantized Decimal if it is a usable price.

    Returns:
        Decimal, or None when the value is missing, zero, negative, boolean,
        non-numeric, NaN, infinite or above MAX_PRICE
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price > MAX_PRICE:
        return None
    price = quantize_price(price)
    if price <= 0:
        return None
    return price


def _base_availability(cabin, shift):
    base = cabin.base_availability
    if not isinstance(base, Mapping):
        raise CabinDataError(cabin.id, "base availability is not a shift mapping")
    value = base.get(shift, True)
    if not isinstance(value, bool):
        raise CabinDataError(cabin.id, f"base availability for {shift.value} is not a boolean")
    return value


def _weekday_price(cabin, day, shift):
    pricing = cabin.default_pricing
    if not isinstance(pricing, Mapping):
        raise CabinDataError(cabin.id, "default pricing is not a weekday mapping")
    row = pricing.get(weekday_index(day))
    if row is None:
        return None
    if not isinstance(row, Mapping):
        raise CabinDataError(cabin.id, f"default pricing row {weekday_index(day)} is not a shift mapping")
    return positive_price(row.get(shift))


def resolve_nominal(cabin, day, shift, fallback_price=PLATFORM_FALLBACK_PRICE):
    """
    Resolve the nominal price and availability of one slot.

    Args:
        cabin: CabinSnapshot
        day: date or ``YYYY-MM-DD`` string
        shift: Shift or shift name
        fallback_price: platform price used when no layer sets one

    Returns:
        NominalRate(price, available); price is always > 0

    Raises:
        InvalidSlotKey: malformed date or shift
        CabinDataError: malformed cabin pricing/availability structure
    """
    day = parse_date_key(day)
    shift = parse_shift(shift)

    if cabin.data_error:
        raise CabinDataError(cabin.id, cabin.data_error)

    entry = cabin.override_for(day, shift)
    if entry is not None and entry.available is not None and not isinstance(entry.available, bool):
        raise CabinDataError(cabin.id, f"override availability for {day} {shift.value} is not a boolean")

    if entry is not None and entry.available is False:
        available = False
    else:
        available = _base_availability(cabin, shift)

    price = positive_price(entry.price) if entry is not None else None
    if price is None:
        price = _weekday_price(cabin, day, shift)
    if price is None:
        price = positive_price(cabin.price)
    if price is None:
        price = positive_price(fallback_price) or PLATFORM_FALLBACK_PRICE

    return NominalRate(price=price, available=available)

"""
In-memory snapshot types consumed and produced by the resolution engine.

Snapshots decouple the engine from the ORM: the catalog layer converts
``Cabin``/``Booking`` rows (or raw pricing JSON) into these frozen dataclasses,
and every resolver is a pure function over them.

Data shapes:
    base_availability:  {Shift: bool}
    default_pricing:    {weekday (Sunday=0): {Shift: price}}
    overrides:          {(date, Shift): OverrideEntry}
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from cabins.exceptions import InvalidSlotKey
from cabins.services.calendar_window import parse_date_key


class Shift(str, Enum):
    MORNING = 'morning'
    AFTERNOON = 'afternoon'
    EVENING = 'evening'


SHIFTS = (Shift.MORNING, Shift.AFTERNOON, Shift.EVENING)


class SlotStatus(str, Enum):
    AVAILABLE = 'available'
    MANUALLY_CLOSED = 'manually_closed'
    BOOKED = 'booked'
    PAST_UNAVAILABLE = 'past_unavailable'


class BookingStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


def parse_shift(value):
    """
    Convert a shift name to ``Shift``.

    Raises:
        InvalidSlotKey: for anything other than morning/afternoon/evening
    """
    if isinstance(value, Shift):
        return value
    if isinstance(value, str):
        try:
            return Shift(value.strip().lower())
        except ValueError:
            pass
    raise InvalidSlotKey(f"Invalid shift: {value!r}")


@dataclass(frozen=True)
class OverrideEntry:
    """One sparse (date, shift) cell of the override layer."""
    price: Any = None
    available: Optional[bool] = None


@dataclass(frozen=True)
class CabinSnapshot:
    id: Any
    location_id: Any = None
    name: str = ''
    base_availability: Mapping[Shift, bool] = field(default_factory=dict)
    default_pricing: Mapping[int, Mapping[Shift, Any]] = field(default_factory=dict)
    overrides: Mapping[Tuple[date, Shift], OverrideEntry] = field(default_factory=dict)
    price: Any = None
    created_on: Optional[date] = None
    # Set when stored rows could not be converted; resolving the cabin then fails
    data_error: Optional[str] = None

    def override_for(self, day, shift):
        return self.overrides.get((day, shift))


@dataclass(frozen=True)
class BookingSnapshot:
    cabin_id: Any
    date: date
    shift: Shift
    status: str = BookingStatus.CONFIRMED.value
    id: Any = None
    price: Optional[Decimal] = None


@dataclass(frozen=True)
class NominalRate:
    """Price and availability before time and bookings are considered."""
    price: Decimal
    available: bool


@dataclass(frozen=True)
class ResolvedSlot:
    cabin_id: Any
    date: date
    shift: Shift
    price: Optional[Decimal]
    status: SlotStatus

    @property
    def is_bookable(self):
        return self.status == SlotStatus.AVAILABLE

    def as_dict(self):
        return {
            'cabin_id': self.cabin_id,
            'date': self.date.isoformat(),
            'shift': self.shift.value,
            'price': str(self.price) if self.price is not None else None,
            'status': self.status.value,
            'bookable': self.is_bookable,
        }


@dataclass
class AggregateDayShift:
    """
    Location-level summary for one (date, shift).

    ``average_price`` is None exactly when no cabin is available.
    ``unresolved_cabins`` counts cabins skipped because their data is malformed;
    they are not part of ``total_cabins``.
    """
    total_cabins: int = 0
    available_cabins: int = 0
    manually_closed_count: int = 0
    booked_cabins: int = 0
    unresolved_cabins: int = 0
    average_price: Optional[Decimal] = None

    @property
    def display_state(self):
        if self.total_cabins == 0:
            return 'unknown'
        if self.manually_closed_count == self.total_cabins:
            return 'closed'
        if self.available_cabins > 0:
            return 'available'
        return 'full'

    def as_dict(self):
        return {
            'total_cabins': self.total_cabins,
            'available_cabins': self.available_cabins,
            'manually_closed_count': self.manually_closed_count,
            'booked_cabins': self.booked_cabins,
            'unresolved_cabins': self.unresolved_cabins,
            'average_price': str(self.average_price) if self.average_price is not None else None,
            'display_state': self.display_state,
        }


# =============================================================================
# CONVERSION HELPERS
# =============================================================================

def _normalize_base_availability(raw):
    if not isinstance(raw, Mapping):
        return raw
    normalized = {}
    for key, value in raw.items():
        try:
            normalized[parse_shift(key)] = value
        except InvalidSlotKey:
            continue
    return normalized


def _normalize_default_pricing(raw):
    """
    Normalize weekday keys to ints and shift keys to ``Shift``.

    Rows that are not mappings are kept as-is so the resolver can report the
    cabin as malformed instead of silently dropping the row.
    """
    if not isinstance(raw, Mapping):
        return raw
    normalized = {}
    for weekday, row in raw.items():
        try:
            index = int(weekday)
        except (TypeError, ValueError):
            continue
        if isinstance(row, Mapping):
            shifts = {}
            for key, value in row.items():
                try:
                    shifts[parse_shift(key)] = value
                except InvalidSlotKey:
                    continue
            normalized[index] = shifts
        else:
            normalized[index] = row
    return normalized


def overrides_from_specific_dates(specific_dates):
    """
    Flatten the nested ``specificDates`` JSON into the keyed override table.

    Accepts both the per-shift shape ``{date: {shift: {price, available}}}``
    and the legacy flat shape ``{date: {morning: 120, availability: {...}}}``.
    """
    overrides = {}
    for raw_date, shifts in (specific_dates or {}).items():
        day = parse_date_key(raw_date)
        if not isinstance(shifts, Mapping):
            continue
        legacy_availability = shifts.get('availability') or {}
        for shift in SHIFTS:
            cell = shifts.get(shift.value)
            available = None
            if isinstance(cell, Mapping):
                price = cell.get('price')
                available = cell.get('available')
            else:
                price = cell
            if isinstance(legacy_availability, Mapping) and shift.value in legacy_availability:
                available = legacy_availability[shift.value]
            if price is None and available is None:
                continue
            overrides[(day, shift)] = OverrideEntry(price=price, available=available)
    return overrides


def cabin_snapshot_from_dict(data):
    """
    Build a snapshot from raw catalog JSON.

    Expected keys: ``id``, optional ``location_id``, ``name``, ``availability``,
    ``pricing`` ({defaultPricing, specificDates}), ``price``, ``created_at``.
    """
    pricing = data.get('pricing') or {}
    created = data.get('created_at')
    return CabinSnapshot(
        id=data.get('id'),
        location_id=data.get('location_id'),
        name=data.get('name', ''),
        base_availability=_normalize_base_availability(data.get('availability') or {}),
        default_pricing=_normalize_default_pricing(pricing.get('defaultPricing') or {}),
        overrides=overrides_from_specific_dates(pricing.get('specificDates')),
        price=data.get('price'),
        created_on=parse_date_key(created[:10] if isinstance(created, str) else created) if created else None,
    )


def cabin_snapshot_from_model(cabin, overrides=None):
    """
    Build a snapshot from a ``Cabin`` model instance.

    Args:
        cabin: Cabin instance (ideally with ``date_overrides`` prefetched)
        overrides: optional iterable of CabinDateOverride rows to use instead
    """
    from django.utils import timezone

    rows = overrides if overrides is not None else cabin.date_overrides.all()
    table: Dict[Tuple[date, Shift], OverrideEntry] = {}
    data_error = None
    for row in rows:
        try:
            shift = parse_shift(row.shift)
        except InvalidSlotKey:
            data_error = f"override {row.pk} has unknown shift {row.shift!r}"
            continue
        table[(row.date, shift)] = OverrideEntry(
            price=row.price,
            available=row.available,
        )
    return CabinSnapshot(
        id=cabin.pk,
        location_id=cabin.location_id,
        name=cabin.name,
        base_availability=_normalize_base_availability(cabin.base_availability),
        default_pricing=_normalize_default_pricing(cabin.default_pricing),
        overrides=table,
        price=cabin.price,
        created_on=timezone.localdate(cabin.created_at) if cabin.created_at else None,
        data_error=data_error,
    )


def booking_snapshot_from_model(booking):
    return BookingSnapshot(
        id=booking.pk,
        cabin_id=booking.cabin_id,
        date=booking.date,
        shift=parse_shift(booking.shift),
        status=booking.status,
        price=booking.price,
    )

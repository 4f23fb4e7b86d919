"""
Cabins models package.

Re-exports all models so Django migrations and imports see one namespace:
    from cabins.models import Location, Cabin, Booking
"""

# Core: Location, Cabin
from .core import (
    Location,
    Cabin,
    default_base_availability,
    default_weekday_pricing,
)

# Pricing: per-date overrides
from .pricing import (
    CabinDateOverride,
    SHIFT_CHOICES,
)

# Bookings
from .bookings import (
    Booking,
)

__all__ = [
    # Core
    'Location', 'Cabin', 'default_base_availability', 'default_weekday_pricing',
    # Pricing
    'CabinDateOverride', 'SHIFT_CHOICES',
    # Bookings
    'Booking',
]

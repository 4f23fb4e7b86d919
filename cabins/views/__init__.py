"""
Views package.

Re-exports all views for URL imports:
    from cabins.views import location_week_summary_ajax, etc.
"""

# Mixins
from .mixins import LocationMixin

# Availability views
from .availability import (
    location_week_summary_ajax,
    cabin_slots_ajax,
    unsold_slots_ajax,
    LocationWeekSummaryPDFView,
)

# Pricing views
from .pricing import (
    nominal_rate_ajax,
    batch_pricing_ajax,
)

# Booking views
from .bookings import (
    booking_quote_ajax,
    create_bookings_ajax,
)

__all__ = [
    'LocationMixin',
    'location_week_summary_ajax', 'cabin_slots_ajax', 'unsold_slots_ajax',
    'LocationWeekSummaryPDFView',
    'nominal_rate_ajax', 'batch_pricing_ajax',
    'booking_quote_ajax', 'create_bookings_ajax',
]

"""
Services package.

Re-exports the engine entry points:
    from cabins.services import resolve_slot, aggregate_location, apply_batch
"""

from .calendar_window import generate_window, single_day_window, clip_window
from .pricing_service import resolve_nominal
from .slot_service import resolve_slot, build_cabin_calendar, confirmed_only, statuses_policy
from .aggregation_service import aggregate_location, LocationAvailabilityService
from .batch_service import apply_batch, save_batch_result, resolve_target_dates
from .booking_service import quote_booking, BookingService
from .report_service import find_unsold_slots

__all__ = [
    'generate_window',
    'single_day_window',
    'clip_window',
    'resolve_nominal',
    'resolve_slot',
    'build_cabin_calendar',
    'confirmed_only',
    'statuses_policy',
    'aggregate_location',
    'LocationAvailabilityService',
    'apply_batch',
    'save_batch_result',
    'resolve_target_dates',
    'quote_booking',
    'BookingService',
    'find_unsold_slots',
]

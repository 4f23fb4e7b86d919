"""
Custom exceptions for the availability and pricing engine.
Raised in cabins.services and translated to JSON errors in cabins.views.
"""


class AvailabilityError(Exception):
    """Base exception for all availability engine errors."""
    pass


class InvalidSlotKey(AvailabilityError):
    """Raised when a date or shift given to a resolver is malformed."""
    pass


class InvalidPrice(AvailabilityError):
    """Raised when a batch edit price is not a finite number greater than zero."""
    pass


class NoApplicableDates(AvailabilityError):
    """Raised when every target date of a batch edit lies in the past."""

    def __init__(self, message, skipped_past_dates=()):
        super().__init__(message)
        self.skipped_past_dates = list(skipped_past_dates)


class CabinDataError(AvailabilityError):
    """Raised when a cabin's stored pricing or availability data is malformed."""

    def __init__(self, cabin_id, message):
        super().__init__(f"Cabin {cabin_id}: {message}")
        self.cabin_id = cabin_id


class SlotUnavailable(AvailabilityError):
    """Raised when a selected slot is not available for booking."""

    def __init__(self, slot, message=None):
        super().__init__(
            message or f"{slot.date.isoformat()} {slot.shift.value} is {slot.status.value}"
        )
        self.slot = slot


class EmptySelection(AvailabilityError):
    """Raised when a booking request selects no slots."""
    pass

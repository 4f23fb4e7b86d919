"""
Engine settings.

Values come from the ``CABINS`` dictionary in Django settings, falling back to
the defaults below. Only the service boundary reads them; the resolvers take
them as plain arguments.
"""

from decimal import Decimal

from django.conf import settings

DEFAULTS = {
    'FALLBACK_PRICE': Decimal('100.00'),
    'SERVICE_FEE_PERCENT': Decimal('10.00'),
    'WINDOW_LENGTH': 7,
    'BLOCKING_BOOKING_STATUSES': ['confirmed'],
}


def get_setting(name):
    """Return a CABINS setting, or its default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown CABINS setting: {name}")
    overrides = getattr(settings, 'CABINS', {}) or {}
    return overrides.get(name, DEFAULTS[name])

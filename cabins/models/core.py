"""
Core models: Location and Cabin.
"""

from django.core.validators import MinValueValidator
from django.db import models

WEEKEND_DEFAULT_PRICE = 150
WEEKDAY_DEFAULT_PRICE = 100


def default_base_availability():
    """Every shift open."""
    return {'morning': True, 'afternoon': True, 'evening': True}


def default_weekday_pricing():
    """
    Weekday price table keyed by weekday number (Sunday = 0).

    Weekends (Sunday and Saturday) start at 150, weekdays at 100.
    """
    table = {}
    for weekday in range(7):
        price = WEEKEND_DEFAULT_PRICE if weekday in (0, 6) else WEEKDAY_DEFAULT_PRICE
        table[str(weekday)] = {'morning': price, 'afternoon': price, 'evening': price}
    return table


# =============================================================================
# LOCATION
# =============================================================================

class Location(models.Model):
    """
    A physical location that groups cabins.

    Example: "Centro" location with five cabins rented out per shift.
    """
    name = models.CharField(
        max_length=200,
        help_text="Location name (e.g., 'Centro')"
    )
    code = models.SlugField(
        max_length=50,
        unique=True,
        help_text="URL-friendly code (e.g., 'centro')"
    )

    # Address
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=50, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)

    cabins_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of cabins (kept in sync by signals)"
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this location is listed"
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Location"
        verbose_name_plural = "Locations"

    def __str__(self):
        return self.name

    def refresh_cabins_count(self):
        """Recount cabins and store the result without touching updated_at."""
        count = self.cabins.count()
        Location.objects.filter(pk=self.pk).update(cabins_count=count)
        self.cabins_count = count
        return count


# =============================================================================
# CABIN
# =============================================================================

class Cabin(models.Model):
    """
    A bookable cabin.

    Availability and pricing layers:
    - ``base_availability``: which shifts are open by default
    - ``default_pricing``: per-weekday, per-shift prices
    - ``price``: flat price used when the weekday table has no usable price
    - ``date_overrides``: per-date, per-shift price/availability overrides
    """
    location = models.ForeignKey(
        Location,
        on_delete=models.CASCADE,
        related_name='cabins',
        help_text="Location this cabin belongs to"
    )

    name = models.CharField(
        max_length=100,
        help_text="Display name (e.g., 'Cabin 1')"
    )
    description = models.TextField(blank=True)

    equipment = models.JSONField(
        default=list,
        blank=True,
        help_text="List of equipment available in the cabin"
    )

    base_availability = models.JSONField(
        default=default_base_availability,
        help_text='Shifts open by default, e.g. {"morning": true, "afternoon": true, "evening": false}'
    )

    default_pricing = models.JSONField(
        default=default_weekday_pricing,
        help_text='Prices by weekday (Sunday = 0) and shift, e.g. {"0": {"morning": 150, ...}}'
    )

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Flat price used when the weekday table has no price"
    )

    sort_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['location', 'sort_order', 'name']
        verbose_name = "Cabin"
        verbose_name_plural = "Cabins"

    def __str__(self):
        return f"{self.location.name} - {self.name}"

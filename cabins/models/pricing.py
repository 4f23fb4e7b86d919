"""
Pricing models: per-date shift overrides.
"""

from django.db import models

from .core import Cabin

SHIFT_CHOICES = [
    ('morning', 'Morning'),
    ('afternoon', 'Afternoon'),
    ('evening', 'Evening'),
]


class CabinDateOverride(models.Model):
    """
    Price and/or availability override for one cabin shift on one date.

    ``available=False`` closes the shift for that date. ``available=None``
    and ``available=True`` leave the cabin's base availability in charge.
    A missing or non-positive ``price`` falls through to the weekday table.
    """
    cabin = models.ForeignKey(
        Cabin,
        on_delete=models.CASCADE,
        related_name='date_overrides'
    )

    date = models.DateField()
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES)

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Override price (blank = use weekday price)"
    )

    available = models.BooleanField(
        null=True,
        blank=True,
        help_text="False closes the shift on this date"
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['cabin', 'date', 'shift']
        verbose_name = "Cabin Date Override"
        verbose_name_plural = "Cabin Date Overrides"
        unique_together = ['cabin', 'date', 'shift']

    def __str__(self):
        parts = [f"{self.cabin.name} {self.date.isoformat()} {self.shift}"]
        if self.price is not None:
            parts.append(f"${self.price}")
        if self.available is False:
            parts.append("closed")
        return " ".join(parts)

"""
Booking model.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q

from .core import Cabin
from .pricing import SHIFT_CHOICES


class Booking(models.Model):
    """
    A professional's booking of one cabin shift on one date.

    Only one confirmed booking may exist per (cabin, date, shift); pending
    and cancelled rows do not take the slot.
    """
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('cancelled', 'Cancelled'),
    ]

    cabin = models.ForeignKey(
        Cabin,
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    professional_name = models.CharField(max_length=200, blank=True)

    date = models.DateField()
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='confirmed'
    )

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Price charged for the shift"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date', 'shift']
        verbose_name = "Booking"
        verbose_name_plural = "Bookings"
        constraints = [
            models.UniqueConstraint(
                fields=['cabin', 'date', 'shift'],
                condition=Q(status='confirmed'),
                name='unique_confirmed_booking_per_slot',
            ),
        ]
        indexes = [
            models.Index(fields=['cabin', 'date'], name='booking_cabin_date_idx'),
        ]

    def __str__(self):
        who = f" ({self.professional_name})" if self.professional_name else ""
        return f"{self.cabin.name} {self.date.isoformat()} {self.shift} [{self.status}]{who}"

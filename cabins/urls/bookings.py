"""Booking URL patterns: quote and create."""

from django.urls import path
from cabins.views import (
    booking_quote_ajax,
    create_bookings_ajax,
)

urlpatterns = [
    path('locations/<slug:location_code>/cabins/<int:cabin_id>/api/booking-quote/',
         booking_quote_ajax, name='booking_quote_ajax'),
    path('locations/<slug:location_code>/cabins/<int:cabin_id>/api/bookings/',
         create_bookings_ajax, name='create_bookings_ajax'),
]

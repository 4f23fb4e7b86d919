"""Pricing URL patterns: nominal rate lookup, batch price edits."""

from django.urls import path
from cabins.views import (
    nominal_rate_ajax,
    batch_pricing_ajax,
)

urlpatterns = [
    path('locations/<slug:location_code>/cabins/<int:cabin_id>/api/nominal-rate/',
         nominal_rate_ajax, name='nominal_rate_ajax'),
    path('locations/<slug:location_code>/cabins/<int:cabin_id>/api/batch-pricing/',
         batch_pricing_ajax, name='batch_pricing_ajax'),
]

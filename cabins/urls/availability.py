"""Availability URL patterns: weekly summary, cabin slots, unsold slots."""

from django.urls import path
from cabins.views import (
    location_week_summary_ajax,
    LocationWeekSummaryPDFView,
    unsold_slots_ajax,
    cabin_slots_ajax,
)

urlpatterns = [
    path('locations/<slug:location_code>/api/week-summary/',
         location_week_summary_ajax, name='week_summary_ajax'),
    path('locations/<slug:location_code>/week-summary/pdf/',
         LocationWeekSummaryPDFView.as_view(), name='week_summary_pdf'),
    path('locations/<slug:location_code>/api/unsold-slots/',
         unsold_slots_ajax, name='unsold_slots_ajax'),
    path('locations/<slug:location_code>/cabins/<int:cabin_id>/api/slots/',
         cabin_slots_ajax, name='cabin_slots_ajax'),
]

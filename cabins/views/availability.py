"""
Availability views: weekly location summary (JSON and PDF), cabin slot
calendar, and the unsold slot report.
"""

import logging
from io import BytesIO

from django.http import HttpResponse
from django.utils import timezone
from django.views.decorators.http import require_GET
from django.views.generic import View

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from cabins.exceptions import AvailabilityError
from cabins.services import LocationAvailabilityService, catalog
from cabins.services.snapshots import SHIFTS

from .mixins import (
    LocationMixin, engine_error_response, get_cabin, get_location, success_response,
)

logger = logging.getLogger(__name__)


# =============================================================================
# JSON ENDPOINTS
# =============================================================================

@require_GET
def location_week_summary_ajax(request, location_code):
    """
    AJAX endpoint for the weekly availability of a whole location.

    URL: /locations/{code}/api/week-summary/?anchor=2026-03-04

    Returns per-day, per-shift totals, average price and display state.
    """
    location = get_location(location_code)
    try:
        service = LocationAvailabilityService(location)
        summary = service.weekly_summary(request.GET.get('anchor'))
    except AvailabilityError as e:
        return engine_error_response(e)
    return success_response(summary)


@require_GET
def cabin_slots_ajax(request, location_code, cabin_id):
    """
    AJAX endpoint for the slot calendar of one cabin.

    URL: /locations/{code}/cabins/{id}/api/slots/?anchor=2026-03-04

    Dates before the cabin was created are not listed.
    """
    location = get_location(location_code)
    cabin = get_cabin(location, cabin_id)
    try:
        service = LocationAvailabilityService(location)
        calendar = service.cabin_calendar(catalog.get_cabin(cabin), request.GET.get('anchor'))
    except AvailabilityError as e:
        return engine_error_response(e)
    return success_response(calendar)


@require_GET
def unsold_slots_ajax(request, location_code):
    """
    AJAX endpoint listing past slots that were open but never booked.

    URL: /locations/{code}/api/unsold-slots/?start=2026-02-01&end=2026-02-28
    """
    location = get_location(location_code)
    try:
        service = LocationAvailabilityService(location)
        report = service.unsold_slots(request.GET.get('start'), request.GET.get('end'))
    except AvailabilityError as e:
        return engine_error_response(e)
    return success_response(report)


# =============================================================================
# PDF EXPORT
# =============================================================================

STATE_COLORS = {
    'available': colors.HexColor('#dcfce7'),
    'full': colors.HexColor('#fee2e2'),
    'closed': colors.HexColor('#e5e7eb'),
    'unknown': colors.white,
}


class LocationWeekSummaryPDFView(LocationMixin, View):
    """
    Export the weekly location summary as PDF.

    URL: /locations/{code}/week-summary/pdf/?anchor=2026-03-04
    """

    def get(self, request, *args, **kwargs):
        location = self.get_location()
        try:
            summary = LocationAvailabilityService(location).weekly_summary(request.GET.get('anchor'))
        except AvailabilityError as e:
            return engine_error_response(e)

        pdf_buffer = self._generate_pdf(location, summary)

        response = HttpResponse(pdf_buffer, content_type='application/pdf')
        filename = f"week_summary_{location.code}_{summary['window'][0] if summary['window'] else 'empty'}.pdf"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response

    def _build_table(self, summary):
        """One row per shift, one column per day."""
        header = ['Shift'] + [day['date'] for day in summary['days']]
        rows = [header]
        cell_states = []
        for shift in SHIFTS:
            row = [shift.value.title()]
            states = []
            for day in summary['days']:
                data = day['shifts'][shift.value]
                price = f"${data['average_price']}" if data['average_price'] else '-'
                row.append(f"{data['available_cabins']}/{data['total_cabins']}\n{price}")
                states.append(data['display_state'])
            rows.append(row)
            cell_states.append(states)

        table = Table(rows, repeatRows=1)
        style = [
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1e3a5f')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ALIGN', (1, 0), (-1, -1), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]
        for row_idx, states in enumerate(cell_states, start=1):
            for col_idx, state in enumerate(states, start=1):
                style.append(('BACKGROUND', (col_idx, row_idx), (col_idx, row_idx), STATE_COLORS[state]))
        table.setStyle(TableStyle(style))
        return table

    def _generate_pdf(self, location, summary):
        """Generate the PDF document."""
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=15*mm,
            leftMargin=15*mm,
            topMargin=15*mm,
            bottomMargin=15*mm
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'CustomTitle',
            parent=styles['Heading1'],
            fontSize=18,
            spaceAfter=6,
            textColor=colors.HexColor('#1e3a5f')
        )
        subtitle_style = ParagraphStyle(
            'CustomSubtitle',
            parent=styles['Normal'],
            fontSize=10,
            textColor=colors.grey,
            spaceAfter=12
        )

        story = [
            Paragraph(f"Weekly Availability - {location.name}", title_style),
            Paragraph(
                f"{summary['cabins']} cabins | Generated: {timezone.now().strftime('%B %d, %Y at %H:%M')}",
                subtitle_style
            ),
            Spacer(1, 6*mm),
        ]

        if summary['days']:
            story.append(self._build_table(summary))
        else:
            story.append(Paragraph("No dates to show for this week.", styles['Normal']))

        doc.build(story)
        buffer.seek(0)
        return buffer.getvalue()

"""
Print the weekly availability of a location.

Usage:
    python manage.py availability_report centro
    python manage.py availability_report centro --anchor 2026-03-04
"""

from django.core.management.base import BaseCommand, CommandError

from cabins.exceptions import AvailabilityError
from cabins.services.snapshots import SHIFTS


class Command(BaseCommand):
    help = 'Print the per-shift availability summary of a location for one week'

    def add_arguments(self, parser):
        parser.add_argument('location_code', type=str)
        parser.add_argument(
            '--anchor',
            type=str,
            default=None,
            help='Any date (YYYY-MM-DD) in the week to report; defaults to today'
        )

    def handle(self, *args, **options):
        from cabins.models import Location
        from cabins.services import LocationAvailabilityService

        try:
            location = Location.objects.get(code=options['location_code'])
        except Location.DoesNotExist:
            raise CommandError(f"Location not found: {options['location_code']}")

        try:
            summary = LocationAvailabilityService(location).weekly_summary(options['anchor'])
        except AvailabilityError as e:
            raise CommandError(str(e))

        self.stdout.write(f"{location.name}: {summary['cabins']} cabins")
        self.stdout.write("")

        if not summary['days']:
            self.stdout.write("No dates in this window.")
            return

        for day in summary['days']:
            self.stdout.write(day['date'])
            for shift in SHIFTS:
                data = day['shifts'][shift.value]
                price = data['average_price'] or '-'
                line = (
                    f"  {shift.value:<10} {data['available_cabins']}/{data['total_cabins']} available"
                    f"  avg {price}  [{data['display_state']}]"
                )
                if data['display_state'] == 'available':
                    self.stdout.write(self.style.SUCCESS(line))
                elif data['display_state'] == 'full':
                    self.stdout.write(self.style.WARNING(line))
                else:
                    self.stdout.write(line)

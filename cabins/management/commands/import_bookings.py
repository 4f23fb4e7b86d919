"""
Management command to import bookings from Excel (.xlsx) or CSV files.

Usage:
    python manage.py import_bookings centro path/to/bookings.csv
    python manage.py import_bookings centro path/to/bookings.xlsx --validate-only
    python manage.py import_bookings centro path/to/bookings.csv --verbose
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

# Row errors printed without --verbose
ERROR_PREVIEW = 10


class Command(BaseCommand):
    help = 'Import bookings for a location from an .xlsx or .csv file'

    def add_arguments(self, parser):
        parser.add_argument('location_code', help='Code of the location whose cabins the rows refer to')
        parser.add_argument('file_path', help='Path to the .xlsx or .csv file')
        parser.add_argument('--validate-only', action='store_true', help='Check columns without importing')
        parser.add_argument('--verbose', action='store_true', help='List every row error')

    def handle(self, *args, **options):
        from cabins.models import Location
        from cabins.services.import_service import BookingImportService

        try:
            location = Location.objects.get(code=options['location_code'])
        except Location.DoesNotExist:
            raise CommandError(f"Location not found: {options['location_code']}")

        file_path = Path(options['file_path'])
        if not file_path.exists():
            raise CommandError(f'File not found: {file_path}')
        if file_path.suffix.lower() not in BookingImportService.SUPPORTED_SUFFIXES:
            raise CommandError(f'Unsupported file format: {file_path.suffix}')

        service = BookingImportService(location)

        if options['validate_only']:
            result = service.validate_file(file_path)
            for issue in result['issues']:
                self.stdout.write(self.style.ERROR(f"  {issue['message']}"))
            if not result['valid']:
                raise CommandError('File is missing required columns (cabin, date, shift)')
            self.stdout.write(self.style.SUCCESS(
                f"✓ File is valid: {result['stats']['total_rows']} rows, "
                f"columns {', '.join(result['stats']['columns_found'])}"
            ))
            return

        result = service.import_file(file_path)
        if not result['success']:
            for error in result['errors']:
                self.stdout.write(self.style.ERROR(f"  {error['message']}"))
            raise CommandError('Import failed')

        self.stdout.write(self.style.SUCCESS(
            f"✓ Import completed: {result['rows_created']} of {result['rows_total']} rows created"
        ))

        errors = result['errors']
        shown = errors if options['verbose'] else errors[:ERROR_PREVIEW]
        for error in shown:
            self.stdout.write(self.style.WARNING(f"  Row {error['row']}: {error['message']}"))
        if len(errors) > len(shown):
            self.stdout.write(f"  ... {len(errors) - len(shown)} more (use --verbose)")

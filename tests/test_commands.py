from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from cabins.models import Booking, Location

pytestmark = pytest.mark.django_db


def run(*args):
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


class TestAvailabilityReport:

    def test_prints_week(self, location, cabin, frozen_today):
        output = run('availability_report', 'centro', '--anchor', '2026-03-09')
        assert 'Centro: 1 cabins' in output
        assert '2026-03-09' in output
        assert '1/1 available' in output
        assert '[available]' in output

    def test_unknown_location(self, db):
        with pytest.raises(CommandError):
            run('availability_report', 'nowhere')

    def test_malformed_anchor(self, location, frozen_today):
        with pytest.raises(CommandError):
            run('availability_report', 'centro', '--anchor', 'next week')


class TestSyncCabinCounts:

    def test_repairs_counts(self, location, cabin_factory):
        cabin_factory(name='A')
        cabin_factory(name='B')
        Location.objects.filter(pk=location.pk).update(cabins_count=0)

        output = run('sync_cabin_counts')

        location.refresh_from_db()
        assert location.cabins_count == 2
        assert '1 location(s) repaired' in output

    def test_nothing_to_repair(self, location, cabin):
        assert 'All cabin counts are correct.' in run('sync_cabin_counts')


class TestImportBookings:

    def test_import(self, location, cabin_factory, tmp_path):
        cabin_factory(name='Sala 1')
        path = tmp_path / 'bookings.csv'
        path.write_text('Cabin,Date,Shift\nSala 1,2026-03-09,morning\n', encoding='utf-8')

        output = run('import_bookings', 'centro', str(path))

        assert 'Import completed' in output
        assert Booking.objects.count() == 1

    def test_validate_only_writes_nothing(self, location, cabin, tmp_path):
        path = tmp_path / 'bookings.csv'
        path.write_text('Cabin,Date,Shift\nCabin 1,2026-03-09,morning\n', encoding='utf-8')

        output = run('import_bookings', 'centro', str(path), '--validate-only')

        assert 'File is valid' in output
        assert not Booking.objects.exists()

    def test_missing_file(self, location, tmp_path):
        with pytest.raises(CommandError):
            run('import_bookings', 'centro', str(tmp_path / 'missing.csv'))

    def test_unknown_location(self, db, tmp_path):
        with pytest.raises(CommandError):
            run('import_bookings', 'nowhere', str(tmp_path / 'missing.csv'))

    def test_xls_not_supported(self, location, tmp_path):
        path = tmp_path / 'bookings.xls'
        path.write_bytes(b'')
        with pytest.raises(CommandError, match='Unsupported file format'):
            run('import_bookings', 'centro', str(path))

    def test_validate_only_missing_columns(self, location, tmp_path):
        path = tmp_path / 'bookings.csv'
        path.write_text('Cabin,Date\nCabin 1,2026-03-09\n', encoding='utf-8')
        with pytest.raises(CommandError, match='required columns'):
            run('import_bookings', 'centro', str(path), '--validate-only')

    def test_row_errors_listed(self, location, cabin, tmp_path):
        path = tmp_path / 'bookings.csv'
        path.write_text('Cabin,Date,Shift\nCabin 1,2026-03-09,morning\nCabin 1,2026-03-09,brunch\n', encoding='utf-8')

        output = run('import_bookings', 'centro', str(path))

        assert '1 of 2 rows created' in output
        assert 'Row 3:' in output

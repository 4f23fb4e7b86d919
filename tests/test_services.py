from datetime import date, datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from cabins.exceptions import SlotUnavailable
from cabins.models import Booking, CabinDateOverride, Location
from cabins.services import BookingService, LocationAvailabilityService, apply_batch, catalog, save_batch_result
from cabins.services.import_service import BookingImportService

pytestmark = pytest.mark.django_db

MONDAY = date(2026, 3, 9)


class TestLocationAvailabilityService:

    def test_weekly_summary(self, location, cabin_factory, frozen_today):
        first = cabin_factory(name='A')
        cabin_factory(name='B')
        Booking.objects.create(cabin=first, date=date(2026, 3, 5), shift='morning')

        summary = LocationAvailabilityService(location).weekly_summary()

        assert summary['today'] == '2026-03-04'
        assert summary['window'][0] == '2026-03-02'
        assert summary['cabins'] == 2
        days = {d['date']: d['shifts'] for d in summary['days']}
        assert days['2026-03-03']['morning']['available_cabins'] == 0
        assert days['2026-03-05']['morning']['booked_cabins'] == 1
        assert days['2026-03-05']['morning']['average_price'] == '100.00'
        assert days['2026-03-07']['evening']['average_price'] == '150.00'

    def test_cabin_calendar_starts_at_creation_date(self, location, cabin_factory, frozen_today):
        cabin = cabin_factory(created=datetime(2026, 3, 6, 9, 0))
        service = LocationAvailabilityService(location)
        calendar = service.cabin_calendar(catalog.get_cabin(cabin))
        assert calendar['window'] == ['2026-03-06', '2026-03-07', '2026-03-08']

    def test_window_length_setting(self, location, cabin, frozen_today, settings):
        settings.CABINS = {'WINDOW_LENGTH': 3}
        summary = LocationAvailabilityService(location).weekly_summary('2026-03-09')
        assert summary['window'] == ['2026-03-09', '2026-03-10', '2026-03-11']

    def test_weekly_summary_starts_at_location_creation(self, location, cabin, frozen_today):
        Location.objects.filter(pk=location.pk).update(
            created_at=timezone.make_aware(datetime(2026, 3, 5, 8, 0))
        )
        location.refresh_from_db()
        summary = LocationAvailabilityService(location).weekly_summary()
        assert summary['window'] == ['2026-03-05', '2026-03-06', '2026-03-07', '2026-03-08']
        assert [d['date'] for d in summary['days']] == summary['window']

    def test_bad_override_row_only_drops_its_cabin(self, location, cabin_factory, frozen_today, caplog):
        good = cabin_factory(name='A')
        bad = cabin_factory(name='B')
        override = CabinDateOverride.objects.create(cabin=bad, date=MONDAY, shift='morning', price=120)
        CabinDateOverride.objects.filter(pk=override.pk).update(shift='night')

        service = LocationAvailabilityService(location)
        summary = service.weekly_summary('2026-03-09')

        morning = summary['days'][0]['shifts']['morning']
        assert morning['total_cabins'] == 1
        assert morning['available_cabins'] == 1
        assert morning['unresolved_cabins'] == 1
        assert f'Skipping cabin {bad.pk}' in caplog.text

        report = service.unsold_slots('2026-03-02', '2026-03-02')
        assert [c['id'] for c in report['cabins']] == [good.pk]

    def test_booking_with_unknown_shift_is_ignored(self, location, cabin, frozen_today, caplog):
        booking = Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning')
        Booking.objects.filter(pk=booking.pk).update(shift='night')

        summary = LocationAvailabilityService(location).weekly_summary('2026-03-09')

        assert summary['days'][0]['shifts']['morning']['available_cabins'] == 1
        assert f'Ignoring booking {booking.pk}' in caplog.text

    def test_unsold_slots_default_range(self, location, cabin, frozen_today):
        Booking.objects.create(cabin=cabin, date=date(2026, 3, 2), shift='morning')
        report = LocationAvailabilityService(location).unsold_slots()

        assert report['start'] == '2026-02-25'
        assert report['end'] == '2026-03-03'
        assert report['cabins'][0]['lost_revenue'] == '2300.00'
        assert report['total_lost_revenue'] == '2300.00'


class TestBatchPersistence:

    def test_save_batch_result(self, cabin, frozen_today):
        CabinDateOverride.objects.create(cabin=cabin, date=MONDAY, shift='morning', price=90, available=False)

        result = apply_batch(catalog.get_cabin(cabin), [MONDAY], ['morning', 'afternoon'], 210, frozen_today)
        assert save_batch_result(cabin, result) == 2

        morning = CabinDateOverride.objects.get(cabin=cabin, date=MONDAY, shift='morning')
        afternoon = CabinDateOverride.objects.get(cabin=cabin, date=MONDAY, shift='afternoon')
        assert (morning.price, morning.available) == (Decimal('210.00'), False)
        assert (afternoon.price, afternoon.available) == (Decimal('210.00'), True)


class TestBookingService:

    def test_create_bookings(self, cabin, frozen_today):
        created, quote = BookingService(cabin).create_bookings(
            {'2026-03-09': ['morning', 'evening']}, professional_name='Ana'
        )
        assert len(created) == 2
        assert quote.total == Decimal('220.00')
        assert Booking.objects.filter(cabin=cabin, status='confirmed').count() == 2
        assert created[0].professional_name == 'Ana'

    def test_second_booking_of_same_slot_rejected(self, cabin, frozen_today):
        service = BookingService(cabin)
        service.create_bookings({'2026-03-09': ['morning']})
        with pytest.raises(SlotUnavailable):
            service.create_bookings({'2026-03-09': ['morning', 'afternoon']})
        assert Booking.objects.filter(cabin=cabin).count() == 1

    def test_concurrent_confirmation_becomes_slot_unavailable(self, cabin, frozen_today, monkeypatch):
        service = BookingService(cabin)
        stale_quote = service.quote({'2026-03-09': ['morning', 'afternoon']})
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='afternoon', status='confirmed')
        monkeypatch.setattr(service, 'quote', lambda selections: stale_quote)

        with pytest.raises(SlotUnavailable):
            service.create_bookings({'2026-03-09': ['morning', 'afternoon']})
        assert Booking.objects.filter(cabin=cabin).count() == 1

    def test_pending_booking_does_not_block_by_default(self, cabin, frozen_today):
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='pending')
        quote = BookingService(cabin).quote({'2026-03-09': ['morning']})
        assert quote.subtotal == Decimal('100.00')

    def test_pending_blocks_when_configured(self, cabin, frozen_today, settings):
        settings.CABINS = {'BLOCKING_BOOKING_STATUSES': ['confirmed', 'pending']}
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='pending')
        with pytest.raises(SlotUnavailable):
            BookingService(cabin).quote({'2026-03-09': ['morning']})


class TestBookingImport:

    def test_import_csv(self, location, cabin_factory, tmp_path):
        cabin = cabin_factory(name='Sala 1')
        path = tmp_path / 'bookings.csv'
        path.write_text(
            'Cabine,Data,Turno,Situação,Valor,Profissional\n'
            'Sala 1,2026-03-09,manhã,confirmed,"120,50",Ana\n'
            'Sala 1,2026-03-09,tarde,,,Bia\n'
            'Sala 9,2026-03-09,noite,confirmed,100,Caio\n'
            'Sala 1,2026-03-09,brunch,confirmed,100,Dani\n'
            'Sala 1,09/03/2026,noite,confirmed,100,Eva\n',
            encoding='utf-8',
        )

        result = BookingImportService(location).import_file(path)

        assert result['success'] is True
        assert result['rows_total'] == 5
        assert result['rows_created'] == 2
        assert result['rows_skipped'] == 3
        assert [e['row'] for e in result['errors']] == [4, 5, 6]

        ana = Booking.objects.get(cabin=cabin, professional_name='Ana')
        assert (ana.shift, ana.status, ana.price) == ('morning', 'confirmed', Decimal('120.50'))
        assert Booking.objects.get(professional_name='Bia').status == 'confirmed'

    def test_duplicate_confirmed_row_reported(self, location, cabin_factory, tmp_path):
        cabin_factory(name='Sala 1')
        path = tmp_path / 'bookings.csv'
        path.write_text(
            'Cabin,Date,Shift\n'
            'Sala 1,2026-03-09,morning\n'
            'Sala 1,2026-03-09,morning\n',
            encoding='utf-8',
        )
        result = BookingImportService(location).import_file(path)
        assert result['rows_created'] == 1
        assert result['errors'][0]['row'] == 3

    def test_missing_columns(self, location, tmp_path):
        path = tmp_path / 'bookings.csv'
        path.write_text('Cabin,Date\nSala 1,2026-03-09\n', encoding='utf-8')
        service = BookingImportService(location)
        assert service.validate_file(path)['valid'] is False
        result = BookingImportService(location).import_file(path)
        assert result['success'] is False
        assert 'shift' in result['errors'][0]['message']

    def test_unsupported_format(self, location, tmp_path):
        path = tmp_path / 'bookings.txt'
        path.write_text('x', encoding='utf-8')
        assert BookingImportService(location).import_file(path)['success'] is False

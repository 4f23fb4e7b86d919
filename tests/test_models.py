from datetime import date
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from cabins.models import Booking, Cabin, CabinDateOverride, Location
from cabins.services import catalog
from cabins.services.snapshots import Shift

pytestmark = pytest.mark.django_db

MONDAY = date(2026, 3, 9)


class TestDefaults:

    def test_cabin_defaults(self, cabin):
        assert cabin.base_availability == {'morning': True, 'afternoon': True, 'evening': True}
        assert cabin.default_pricing['0']['morning'] == 150
        assert cabin.default_pricing['6']['evening'] == 150
        assert cabin.default_pricing['1']['afternoon'] == 100
        assert cabin.price is None

    def test_defaults_are_not_shared(self, cabin_factory):
        first = cabin_factory(name='A')
        first.base_availability['evening'] = False
        second = cabin_factory(name='B')
        assert second.base_availability['evening'] is True

    def test_str(self, cabin, location):
        assert str(location) == 'Centro'
        assert str(cabin) == 'Centro - Cabin 1'


class TestCabinCountSignals:

    def test_create_and_delete_update_count(self, location, cabin_factory):
        first = cabin_factory(name='A')
        cabin_factory(name='B')
        location.refresh_from_db()
        assert location.cabins_count == 2

        first.delete()
        location.refresh_from_db()
        assert location.cabins_count == 1

    def test_moving_cabin_recounts_both_locations(self, location, cabin):
        other = Location.objects.create(name='Norte', code='norte')
        cabin.location = other
        cabin.save()

        location.refresh_from_db()
        other.refresh_from_db()
        assert location.cabins_count == 0
        assert other.cabins_count == 1

    def test_refresh_cabins_count(self, location, cabin):
        Location.objects.filter(pk=location.pk).update(cabins_count=9)
        location.refresh_from_db()
        assert location.refresh_cabins_count() == 1


class TestBookingConstraint:

    def test_one_confirmed_booking_per_slot(self, cabin):
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='confirmed')
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='confirmed')

    def test_pending_and_cancelled_do_not_conflict(self, cabin):
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='confirmed')
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='pending')
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='cancelled')
        assert Booking.objects.filter(cabin=cabin).count() == 3

    def test_one_override_per_slot(self, cabin):
        CabinDateOverride.objects.create(cabin=cabin, date=MONDAY, shift='morning', price=Decimal('120'))
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                CabinDateOverride.objects.create(cabin=cabin, date=MONDAY, shift='morning', available=False)


class TestCatalog:

    def test_cabins_for_location_as_snapshots(self, location, cabin_factory):
        second = cabin_factory(name='B', sort_order=2)
        first = cabin_factory(name='A', sort_order=1)
        CabinDateOverride.objects.create(cabin=first, date=MONDAY, shift='evening', available=False)

        snapshots = catalog.get_cabins_for_location(location.pk)

        assert [s.id for s in snapshots] == [first.pk, second.pk]
        assert snapshots[0].overrides[(MONDAY, Shift.EVENING)].available is False
        assert snapshots[0].default_pricing[1][Shift.MORNING] == 100
        assert snapshots[0].created_on == date(2026, 1, 1)

    def test_confirmed_bookings_filtered_by_status_and_range(self, cabin):
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='morning', status='confirmed')
        Booking.objects.create(cabin=cabin, date=MONDAY, shift='evening', status='pending')
        Booking.objects.create(cabin=cabin, date=date(2026, 4, 1), shift='morning', status='confirmed')

        bookings = catalog.get_confirmed_bookings([cabin.pk], ('2026-03-02', '2026-03-15'))
        assert [(b.date, b.shift) for b in bookings] == [(MONDAY, Shift.MORNING)]

        with_pending = catalog.get_confirmed_bookings(
            [cabin.pk], ('2026-03-02', '2026-03-15'), statuses=['confirmed', 'pending']
        )
        assert len(with_pending) == 2

    def test_get_cabin_snapshot(self, cabin):
        assert catalog.get_cabin(Cabin.objects.get(pk=cabin.pk)).id == cabin.pk

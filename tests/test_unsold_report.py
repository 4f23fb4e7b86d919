from datetime import date, timedelta
from decimal import Decimal

from cabins.services.report_service import find_unsold_slots
from cabins.services.snapshots import SHIFTS, BookingSnapshot, OverrideEntry, Shift

MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)


def test_open_unbooked_past_slots_are_lost(make_cabin, today):
    report = find_unsold_slots([make_cabin()], [], [MONDAY, TUESDAY], today)
    entry = report[1]
    assert len(entry['lost_slots']) == 6
    assert entry['lost_revenue'] == Decimal('600.00')
    assert entry['lost_slots'][0] == {'date': '2026-03-02', 'shift': 'morning', 'price': Decimal('100.00')}


def test_booked_and_closed_slots_are_not_lost(make_cabin, today):
    cabin = make_cabin(
        base_availability={Shift.EVENING: False},
        overrides={(MONDAY, Shift.AFTERNOON): OverrideEntry(available=False)},
    )
    bookings = [BookingSnapshot(cabin_id=1, date=MONDAY, shift=Shift.MORNING)]
    report = find_unsold_slots([cabin], bookings, [MONDAY], today)
    assert report[1]['lost_slots'] == []
    assert report[1]['lost_revenue'] == Decimal('0.00')


def test_today_and_future_are_ignored(make_cabin, today):
    report = find_unsold_slots([make_cabin()], [], [today, today + timedelta(days=1)], today)
    assert report[1]['lost_slots'] == []


def test_dates_before_cabin_creation_ignored(make_cabin, today):
    cabin = make_cabin(created_on=TUESDAY)
    report = find_unsold_slots([cabin], [], [MONDAY, TUESDAY], today)
    assert {slot['date'] for slot in report[1]['lost_slots']} == {'2026-03-03'}


def test_malformed_cabin_skipped(make_cabin, today):
    cabins = [make_cabin(id=1), make_cabin(id=2, base_availability=None)]
    report = find_unsold_slots(cabins, [], [MONDAY], today)
    assert list(report) == [1]
    assert len(report[1]['lost_slots']) == len(SHIFTS)

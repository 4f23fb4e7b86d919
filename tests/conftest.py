import datetime
from datetime import date

import pytest
from django.utils import timezone

from cabins.services.snapshots import SHIFTS, CabinSnapshot

# Wednesday; the surrounding week runs Monday 2026-03-02 to Sunday 2026-03-08
TODAY = date(2026, 3, 4)


def weekly_prices(weekday=100, weekend=150):
    """default_pricing table with Sunday = 0 and Saturday = 6 as weekend."""
    return {
        wd: {shift: (weekend if wd in (0, 6) else weekday) for shift in SHIFTS}
        for wd in range(7)
    }


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def monday():
    """A future Monday."""
    return date(2026, 3, 9)


@pytest.fixture
def yesterday():
    return TODAY - datetime.timedelta(days=1)


@pytest.fixture
def price_table():
    return weekly_prices


@pytest.fixture
def make_cabin():
    """Factory for in-memory cabin snapshots."""
    def _make(id=1, **kwargs):
        values = {
            'location_id': 1,
            'name': f'Cabin {id}',
            'base_availability': {shift: True for shift in SHIFTS},
            'default_pricing': weekly_prices(),
            'overrides': {},
            'price': None,
            'created_on': None,
        }
        values.update(kwargs)
        return CabinSnapshot(id=id, **values)
    return _make


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def frozen_today(monkeypatch):
    """Pin the catalog clock used by services and views."""
    monkeypatch.setattr('cabins.services.catalog.get_today', lambda: TODAY)
    return TODAY


@pytest.fixture
def location(db):
    """Location created well before TODAY."""
    from cabins.models import Location
    location = Location.objects.create(name='Centro', code='centro', city='São Paulo')
    Location.objects.filter(pk=location.pk).update(
        created_at=timezone.make_aware(datetime.datetime(2026, 1, 1, 12, 0))
    )
    location.refresh_from_db()
    return location


@pytest.fixture
def cabin_factory(location):
    """Create Cabin rows created well before TODAY."""
    from cabins.models import Cabin

    def _create(name='Cabin 1', created=datetime.datetime(2026, 1, 1, 12, 0), **kwargs):
        kwargs.setdefault('location', location)
        cabin = Cabin.objects.create(name=name, **kwargs)
        Cabin.objects.filter(pk=cabin.pk).update(created_at=timezone.make_aware(created))
        cabin.refresh_from_db()
        return cabin
    return _create


@pytest.fixture
def cabin(cabin_factory):
    return cabin_factory()

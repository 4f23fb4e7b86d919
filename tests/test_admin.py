from datetime import date

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext
from django.urls import reverse

from cabins.models import Booking, CabinDateOverride

pytestmark = pytest.mark.django_db

TODAY = date(2026, 3, 4)


def changelist(admin_client):
    with CaptureQueriesContext(connection) as queries:
        response = admin_client.get(reverse('admin:cabins_cabin_changelist'))
    assert response.status_code == 200
    return response.content.decode(), len(queries)


def test_status_today_column(admin_client, cabin_factory, frozen_today):
    first = cabin_factory(name='A')
    second = cabin_factory(name='B')
    Booking.objects.create(cabin=first, date=TODAY, shift='morning')
    CabinDateOverride.objects.create(cabin=second, date=TODAY, shift='evening', available=False)

    content, _ = changelist(admin_client)

    assert 'morning: booked' in content
    assert 'evening: manually_closed' in content


def test_status_today_query_count_does_not_grow_with_cabins(admin_client, cabin_factory, frozen_today):
    first = cabin_factory(name='A')
    Booking.objects.create(cabin=first, date=TODAY, shift='morning')
    changelist(admin_client)
    _, with_one = changelist(admin_client)

    for name in ('B', 'C', 'D'):
        cabin = cabin_factory(name=name)
        Booking.objects.create(cabin=cabin, date=TODAY, shift='afternoon')
    _, with_four = changelist(admin_client)

    assert with_four == with_one

"""
Signal handlers keeping Location.cabins_count in sync with its cabins.
"""

import logging

from django.db.models.signals import post_delete, post_init, post_save
from django.dispatch import receiver

from .models import Cabin, Location

logger = logging.getLogger(__name__)


def _sync_location(location_id):
    count = Cabin.objects.filter(location_id=location_id).count()
    Location.objects.filter(pk=location_id).update(cabins_count=count)
    logger.debug("Location %s now has %d cabins", location_id, count)


@receiver(post_init, sender=Cabin)
def remember_location(sender, instance, **kwargs):
    instance._previous_location_id = instance.__dict__.get('location_id')


@receiver(post_save, sender=Cabin)
def update_cabins_count_on_save(sender, instance, created, **kwargs):
    """
    When a cabin is created, recount its location.
    Moving a cabin to another location recounts both.
    """
    previous = getattr(instance, '_previous_location_id', None)
    if previous and previous != instance.location_id:
        _sync_location(previous)
    if created or previous != instance.location_id:
        _sync_location(instance.location_id)
    instance._previous_location_id = instance.location_id


@receiver(post_delete, sender=Cabin)
def update_cabins_count_on_delete(sender, instance, **kwargs):
    """When a cabin is deleted, recount its location."""
    _sync_location(instance.location_id)

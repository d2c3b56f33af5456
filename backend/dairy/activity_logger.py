import logging

from django.contrib.contenttypes.models import ContentType
from django.core import serializers

from .models import Activity

logger = logging.getLogger(__name__)


def log_activity(user, action_type, instance, description=None):
    """Record an activity entry.

    By default a generic description is generated. For ``deleted`` actions the
    row is serialised into ``object_repr`` so the soft-deleted state can be
    audited later.
    """
    if description is None:
        description = f"{instance.__class__.__name__} {instance} was {action_type}."
    object_repr = ''

    if action_type == 'deleted':
        object_repr = serializers.serialize('json', [instance])

    if user is not None and not getattr(user, 'pk', None):
        user = None

    Activity.objects.create(
        user=user,
        action_type=action_type,
        description=description[:255],
        content_type=ContentType.objects.get_for_model(instance),
        object_id=instance.pk,
        object_repr=object_repr,
    )
    logger.info("%s %s id=%s", instance.__class__.__name__, action_type, instance.pk)

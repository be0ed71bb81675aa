"""
In-app notifications.

A notification is stored for the recipient and, once the surrounding
transaction commits, pushed to the recipient's websocket group
``user.<id>`` (see ``care.realtime.consumers``).
"""
import logging
from typing import Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from care.models import Notification, User
from care.serializers.shapes import notification_data

logger = logging.getLogger(__name__)


def user_group(user_id: int) -> str:
    return f"user.{user_id}"


def _push(n: Notification) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(
            user_group(n.user_id),
            {"type": "notification.push", "payload": notification_data(n)},
        )
    except Exception:
        # delivery is best effort; the row is already stored
        logger.warning('websocket push failed for notification %s', n.id, exc_info=True)


def notify(user: User, title: str, message: str, *, ntype: str = 'system', related: Optional[str] = None) -> Notification:
    n = Notification.objects.create(
        user=user, title=title, message=message, type=ntype, related_entity=related or '',
    )
    transaction.on_commit(lambda: _push(n))
    return n


def list_notifications(user: User, *, unread_only: bool = False):
    qs = Notification.objects.filter(user=user)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs.order_by('-created_at', '-id')


def mark_read(user: User, notification_id: int) -> Optional[Notification]:
    n = Notification.objects.filter(id=notification_id, user=user).first()
    if n is None:
        return None
    if not n.is_read:
        n.is_read = True
        n.save(update_fields=['is_read'])
    return n

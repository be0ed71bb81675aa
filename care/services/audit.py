"""
Business audit trail.

One :class:`~care.models.AuditEvent` row per security or lifecycle
relevant action (logins, registrations, booking and appointment status
changes, prescriptions).  Rows are written inside the caller's
transaction so a rolled back operation leaves no audit entry behind.
"""
import logging
from typing import Any, Dict, Optional

from care.models import AuditEvent, User

logger = logging.getLogger(__name__)


def client_ip(request) -> Optional[str]:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def log_action(*, user: Optional[User], action: str, object_type: Optional[str] = None,
               object_id: Optional[int] = None, detail: Optional[Dict[str, Any]] = None,
               request=None) -> AuditEvent:
    detail = dict(detail or {})
    if request is not None:
        detail.setdefault('ip', client_ip(request))
    logger.info('audit %s %s:%s by %s', action, object_type, object_id, getattr(user, 'id', None))
    return AuditEvent.objects.create(
        user=user if getattr(user, 'pk', None) else None,
        action=action,
        object_type=object_type,
        object_id=object_id,
        detail=detail,
    )

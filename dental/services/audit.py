from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model

from dental.models import AuditEvent

User = get_user_model()


def log_action(*, user: Optional[User] = None, user_id: Optional[int] = None, action: str,
               object_type: Optional[str] = None, object_id: Optional[int] = None,
               detail: Optional[Dict[str, Any]] = None) -> AuditEvent:
    """Persist an audit event for ``user`` (or a bare ``user_id``; both may be None)."""
    if user is not None:
        user_id = user.id
    return AuditEvent.objects.create(
        user_id=user_id,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )

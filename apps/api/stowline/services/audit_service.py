"""Admin audit logging.

Every admin mutation appends one AdminLog row in the same transaction as the
change it describes, so the log and the data commit or roll back together.

Guidelines:
- NEVER put contact data (phone numbers, emails) in details
- Use IDs instead of raw data where possible
"""

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from stowline.db.enums import AdminAction, AuditTargetType
from stowline.db.models import AdminLog


def log_admin_action(
    db: Session,
    admin_id: UUID,
    action: AdminAction,
    target_type: AuditTargetType,
    target_id: UUID | str,
    details: dict[str, Any] | None = None,
) -> AdminLog:
    """
    Append an admin audit entry.

    Does not commit; the caller commits it together with the mutation.
    """
    entry = AdminLog(
        admin_id=admin_id,
        action=action.value,
        target_type=target_type.value,
        target_id=str(target_id),
        details=details,
    )
    db.add(entry)
    db.flush()
    return entry


def list_admin_logs(
    db: Session,
    *,
    target_type: AuditTargetType | None = None,
    target_id: UUID | str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[AdminLog], int]:
    """Newest-first audit entries, optionally scoped to one target."""
    query = db.query(AdminLog)
    if target_type:
        query = query.filter(AdminLog.target_type == target_type.value)
    if target_id is not None:
        query = query.filter(AdminLog.target_id == str(target_id))
    total = query.count()
    items = query.order_by(AdminLog.created_at.desc()).offset(offset).limit(limit).all()
    return items, total

"""Admin audit log viewer."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stowline.core.deps import get_db, require_admin
from stowline.db.enums import AuditTargetType
from stowline.schemas.audit import AdminLogListResponse, AdminLogRead
from stowline.schemas.auth import AccountSession
from stowline.services import audit_service

router = APIRouter()


@router.get("", response_model=AdminLogListResponse)
def list_audit_logs(
    target_type: AuditTargetType | None = Query(None, description="Filter by target type"),
    target_id: str | None = Query(None, max_length=64, description="Filter by target id"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AccountSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Newest first. Viewers may read the log."""
    items, total = audit_service.list_admin_logs(
        db, target_type=target_type, target_id=target_id, limit=limit, offset=offset
    )
    return AdminLogListResponse(
        items=[AdminLogRead.model_validate(entry) for entry in items], total=total
    )

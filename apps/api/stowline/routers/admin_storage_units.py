"""Admin storage unit routes: inventory, occupancy and cleaning."""

import logging
from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stowline.core.deps import get_db, require_admin, require_admin_writer, require_csrf_header
from stowline.db.enums import StorageUnitStatus
from stowline.schemas.auth import AccountSession
from stowline.schemas.storage import (
    AssignUnitRequest,
    CleaningRequest,
    CleaningResponse,
    ReleaseUnitRequest,
    StorageSummaryResponse,
    StorageUnitListItem,
    StorageUnitListResponse,
    StorageUnitRead,
    StorageUnitUsageRead,
)
from stowline.services import storage_unit_service, user_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_unit_or_404(db: Session, unit_id: UUID):
    unit = storage_unit_service.get_storage_unit(db, unit_id)
    if not unit:
        raise HTTPException(status_code=404, detail="Storage unit not found")
    return unit


@router.get("", response_model=StorageUnitListResponse)
def list_storage_units(
    status: StorageUnitStatus | None = None,
    search: str | None = Query(None, max_length=50),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AccountSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    rows, total = storage_unit_service.list_storage_units(
        db, status=status, search=search, limit=limit, offset=offset
    )
    items = [
        StorageUnitListItem(
            **StorageUnitRead.model_validate(unit).model_dump(),
            active_usage=StorageUnitUsageRead.model_validate(usage) if usage else None,
        )
        for unit, usage in rows
    ]
    return StorageUnitListResponse(items=items, total=total)


@router.get("/summary", response_model=StorageSummaryResponse)
def get_summary(
    session: AccountSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    summary = storage_unit_service.get_storage_summary(db)
    return StorageSummaryResponse(**asdict(summary))


@router.post(
    "/{unit_id}/clean",
    response_model=CleaningResponse,
    dependencies=[Depends(require_csrf_header)],
)
def mark_clean(
    unit_id: UUID,
    data: CleaningRequest,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    """
    Mark a unit clean with photo evidence.

    Unit update, cleaning record and audit row commit together or not at all.
    """
    if not data.photos:
        raise HTTPException(status_code=400, detail="At least one cleaning photo is required")

    unit = _get_unit_or_404(db, unit_id)
    try:
        cleaning = storage_unit_service.mark_clean(
            db, unit, photos=data.photos, admin_id=session.account_id, notes=data.notes
        )
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Cleaning write failed for storage unit %s", unit_id)
        raise HTTPException(status_code=500, detail="Failed to record cleaning")

    db.refresh(unit)
    return CleaningResponse(
        storage_unit=StorageUnitRead.model_validate(unit), cleaning_id=cleaning.id
    )


@router.post(
    "/{unit_id}/assign",
    response_model=StorageUnitUsageRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def assign_unit(
    unit_id: UUID,
    data: AssignUnitRequest,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    unit = _get_unit_or_404(db, unit_id)
    if not user_service.get_user(db, data.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    try:
        usage = storage_unit_service.start_usage(
            db,
            unit,
            user_id=data.user_id,
            admin_id=session.account_id,
            start_appointment_id=data.start_appointment_id,
            padlock_combo=data.padlock_combo,
            warehouse_location=data.warehouse_location,
            warehouse_name=data.warehouse_name,
            description=data.description,
        )
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(usage)
    return usage


@router.post(
    "/{unit_id}/release",
    response_model=StorageUnitUsageRead,
    dependencies=[Depends(require_csrf_header)],
)
def release_unit(
    unit_id: UUID,
    data: ReleaseUnitRequest,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    unit = _get_unit_or_404(db, unit_id)
    try:
        usage = storage_unit_service.end_usage(
            db, unit, admin_id=session.account_id, end_appointment_id=data.end_appointment_id
        )
        db.commit()
    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    db.refresh(usage)
    return usage

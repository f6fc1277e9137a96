from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from statuspage.core.enums import MaintenanceStatus
from statuspage.db import get_db
from statuspage.models.user import User
from statuspage.routers.auth import require_status_writer
from statuspage.schemas.maintenance import (
    MaintenanceCreate,
    MaintenanceDetail,
    MaintenanceEdit,
    MaintenanceSummary,
    MaintenanceUpdateCreate,
    MaintenanceUpdateOut,
)
from statuspage.services import maintenance_lifecycle

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.get("", response_model=List[MaintenanceSummary])
def list_maintenance(
    status_: Optional[MaintenanceStatus] = Query(default=None, alias="status"),
    upcoming: bool = False,
    db: Session = Depends(get_db),
):
    return maintenance_lifecycle.list_maintenance(db, status=status_, upcoming=upcoming)


@router.post("", response_model=MaintenanceDetail, status_code=status.HTTP_201_CREATED)
def create_maintenance(
    payload: MaintenanceCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    m = maintenance_lifecycle.create_maintenance(
        db,
        title=payload.title,
        description=payload.description,
        impact=payload.impact,
        scheduled_start_time=payload.scheduled_start_time,
        scheduled_end_time=payload.scheduled_end_time,
        service_ids=payload.service_ids,
        component_ids=payload.component_ids,
    )
    return maintenance_lifecycle.get_maintenance(db, m.id)


@router.get("/{maintenance_id}", response_model=MaintenanceDetail)
def get_maintenance(maintenance_id: int, db: Session = Depends(get_db)):
    return maintenance_lifecycle.get_maintenance(db, maintenance_id)


@router.put("/{maintenance_id}", response_model=MaintenanceDetail)
def edit_maintenance(
    maintenance_id: int,
    payload: MaintenanceEdit,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    maintenance_lifecycle.edit_maintenance(db, maintenance_id, payload.model_dump(exclude_unset=True))
    return maintenance_lifecycle.get_maintenance(db, maintenance_id)


@router.delete("/{maintenance_id}")
def delete_maintenance(
    maintenance_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    maintenance_lifecycle.delete_maintenance(db, maintenance_id)
    return {"message": "Maintenance deleted successfully"}


@router.get("/{maintenance_id}/updates", response_model=List[MaintenanceUpdateOut])
def list_maintenance_updates(maintenance_id: int, db: Session = Depends(get_db)):
    return maintenance_lifecycle.list_updates(db, maintenance_id)


@router.post(
    "/{maintenance_id}/updates",
    response_model=MaintenanceUpdateOut,
    status_code=status.HTTP_201_CREATED,
)
def create_maintenance_update(
    maintenance_id: int,
    payload: MaintenanceUpdateCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    return maintenance_lifecycle.append_update(
        db,
        maintenance_id,
        status=payload.status,
        title=payload.title,
        description=payload.description,
    )

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from statuspage.db import get_db
from statuspage.models.user import User
from statuspage.routers.auth import require_status_writer
from statuspage.schemas.incident import (
    IncidentCreate,
    IncidentDetail,
    IncidentEdit,
    IncidentSummary,
    IncidentUpdateCreate,
    IncidentUpdateOut,
)
from statuspage.services import incident_lifecycle

router = APIRouter(prefix="/incidents", tags=["Incidents"])


@router.get("", response_model=List[IncidentSummary])
def list_incidents(db: Session = Depends(get_db)):
    return incident_lifecycle.list_incidents(db)


@router.post("", response_model=IncidentDetail, status_code=status.HTTP_201_CREATED)
def create_incident(
    payload: IncidentCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    inc = incident_lifecycle.create_incident(
        db,
        title=payload.title,
        description=payload.description,
        impact=payload.impact,
        service_ids=payload.service_ids,
        component_ids=payload.component_ids,
    )
    return incident_lifecycle.get_incident(db, inc.id)


@router.get("/{incident_id}", response_model=IncidentDetail)
def get_incident(incident_id: int, db: Session = Depends(get_db)):
    return incident_lifecycle.get_incident(db, incident_id)


@router.put("/{incident_id}", response_model=IncidentDetail)
def edit_incident(
    incident_id: int,
    payload: IncidentEdit,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    incident_lifecycle.edit_incident(db, incident_id, payload.model_dump(exclude_unset=True))
    return incident_lifecycle.get_incident(db, incident_id)


@router.get("/{incident_id}/updates", response_model=List[IncidentUpdateOut])
def list_incident_updates(incident_id: int, db: Session = Depends(get_db)):
    return incident_lifecycle.list_updates(db, incident_id)


@router.post(
    "/{incident_id}/updates",
    response_model=IncidentUpdateOut,
    status_code=status.HTTP_201_CREATED,
)
def create_incident_update(
    incident_id: int,
    payload: IncidentUpdateCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    return incident_lifecycle.append_update(
        db,
        incident_id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
    )

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from statuspage.core.enums import ServiceStatus
from statuspage.core.timeutils import utc_now
from statuspage.db import get_db
from statuspage.models.service import Service
from statuspage.models.service_status_history import ServiceStatusHistory
from statuspage.models.user import User
from statuspage.routers.auth import require_status_writer
from statuspage.schemas.service import (
    ServiceCreate,
    ServiceOut,
    ServiceStatusHistoryOut,
    ServiceUpdate,
    ServiceWithComponents,
)

logger = logging.getLogger("statuspage.services")

router = APIRouter(prefix="/services", tags=["Services"])

_NON_NULLABLE = {"name", "status", "order", "is_visible"}


def get_service_or_404(db: Session, service_id: int) -> Service:
    svc = db.query(Service).filter(Service.id == int(service_id)).first()
    if not svc:
        raise HTTPException(status_code=404, detail="Service not found")
    return svc


def record_status(db: Session, svc: Service, message: Optional[str] = None) -> None:
    db.add(
        ServiceStatusHistory(
            service=svc,
            status=svc.status,
            message=(message or "").strip() or None,
            created_at=utc_now(),
        )
    )


def with_visible_components(svc: Service) -> Dict[str, Any]:
    out = ServiceOut.model_validate(svc).model_dump()
    comps = [c for c in svc.components if c.is_visible]
    out["components"] = sorted(comps, key=lambda c: (int(c.order or 0), c.name or ""))
    return out


@router.get("", response_model=List[ServiceWithComponents])
def list_services(db: Session = Depends(get_db)):
    rows = (
        db.query(Service)
        .options(selectinload(Service.components))
        .order_by(Service.order.asc(), Service.name.asc())
        .all()
    )
    return [with_visible_components(s) for s in rows]


@router.post("", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    now = utc_now()
    data = payload.model_dump()
    svc = Service(**data, created_at=now, updated_at=now)
    db.add(svc)
    record_status(db, svc, "Service created")
    db.commit()
    db.refresh(svc)

    logger.info("Servicio creado id=%s name=%s status=%s", svc.id, svc.name, svc.status)
    return svc


@router.get("/{service_id}", response_model=ServiceOut)
def get_service(service_id: int, db: Session = Depends(get_db)):
    return get_service_or_404(db, service_id)


@router.put("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    svc = get_service_or_404(db, service_id)

    data = payload.model_dump(exclude_unset=True)
    message = data.pop("status_message", None)
    old_status = ServiceStatus(svc.status)

    for k, v in data.items():
        if v is None and k in _NON_NULLABLE:
            continue
        setattr(svc, k, v)

    svc.updated_at = utc_now()
    if ServiceStatus(svc.status) != old_status:
        record_status(db, svc, message)
        logger.info("Servicio id=%s cambia de %s a %s", svc.id, old_status.value, svc.status)

    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


@router.delete("/{service_id}")
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    svc = get_service_or_404(db, service_id)
    # cascade ORM: componentes, historial y links con incidentes/mantenimientos
    db.delete(svc)
    db.commit()
    logger.info("Servicio eliminado id=%s", service_id)
    return {"message": "Service deleted successfully"}


@router.get("/{service_id}/history", response_model=List[ServiceStatusHistoryOut])
def get_service_history(service_id: int, limit: int = 50, db: Session = Depends(get_db)):
    get_service_or_404(db, service_id)
    limit = max(1, min(int(limit), 500))
    return (
        db.query(ServiceStatusHistory)
        .filter(ServiceStatusHistory.service_id == int(service_id))
        .order_by(ServiceStatusHistory.created_at.desc(), ServiceStatusHistory.id.desc())
        .limit(limit)
        .all()
    )

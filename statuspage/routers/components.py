from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from statuspage.core.timeutils import utc_now
from statuspage.db import get_db
from statuspage.models.component import Component
from statuspage.models.user import User
from statuspage.routers.auth import require_status_writer
from statuspage.routers.services import get_service_or_404
from statuspage.schemas.service import ComponentCreate, ComponentOut, ComponentUpdate

logger = logging.getLogger("statuspage.components")

router = APIRouter(prefix="/services/{service_id}/components", tags=["Components"])

_NON_NULLABLE = {"name", "status", "order", "is_visible"}


def _get_component_or_404(db: Session, service_id: int, component_id: int) -> Component:
    # el componente tiene que colgar de ESTE servicio
    comp = (
        db.query(Component)
        .filter(Component.id == int(component_id), Component.service_id == int(service_id))
        .first()
    )
    if not comp:
        raise HTTPException(status_code=404, detail="Component not found")
    return comp


@router.get("", response_model=List[ComponentOut])
def list_components(service_id: int, db: Session = Depends(get_db)):
    get_service_or_404(db, service_id)
    return (
        db.query(Component)
        .filter(Component.service_id == int(service_id))
        .order_by(Component.order.asc(), Component.name.asc())
        .all()
    )


@router.post("", response_model=ComponentOut, status_code=status.HTTP_201_CREATED)
def create_component(
    service_id: int,
    payload: ComponentCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    get_service_or_404(db, service_id)

    now = utc_now()
    comp = Component(service_id=int(service_id), **payload.model_dump(), created_at=now, updated_at=now)
    db.add(comp)
    db.commit()
    db.refresh(comp)

    logger.info("Componente creado id=%s service_id=%s", comp.id, service_id)
    return comp


@router.get("/{component_id}", response_model=ComponentOut)
def get_component(service_id: int, component_id: int, db: Session = Depends(get_db)):
    return _get_component_or_404(db, service_id, component_id)


@router.put("/{component_id}", response_model=ComponentOut)
def update_component(
    service_id: int,
    component_id: int,
    payload: ComponentUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    comp = _get_component_or_404(db, service_id, component_id)

    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in _NON_NULLABLE:
            continue
        setattr(comp, k, v)
    comp.updated_at = utc_now()

    db.add(comp)
    db.commit()
    db.refresh(comp)
    return comp


@router.delete("/{component_id}")
def delete_component(
    service_id: int,
    component_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_status_writer),
):
    comp = _get_component_or_404(db, service_id, component_id)
    db.delete(comp)
    db.commit()
    logger.info("Componente eliminado id=%s service_id=%s", component_id, service_id)
    return {"message": "Component deleted successfully"}

# statuspage/services/maintenance_lifecycle.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from statuspage.core.enums import Impact, MaintenanceStatus, status_label
from statuspage.core.errors import NotFoundError, ValidationError, validation_issue
from statuspage.core.timeutils import ensure_utc, utc_now
from statuspage.models.maintenance import ScheduledMaintenance
from statuspage.models.maintenance_component import MaintenanceComponent
from statuspage.models.maintenance_service import MaintenanceService
from statuspage.models.maintenance_update import MaintenanceUpdate
from statuspage.services.linking import (
    affected_components,
    affected_services,
    load_components,
    load_services,
    newest_first,
)

logger = logging.getLogger("statuspage.maintenance")

INITIAL_UPDATE_TITLE = "Maintenance Scheduled"

TERMINAL_STATUSES = frozenset({MaintenanceStatus.COMPLETED, MaintenanceStatus.CANCELLED})
ACTIVE_STATUSES = (MaintenanceStatus.SCHEDULED, MaintenanceStatus.IN_PROGRESS)

_TEXT_FIELDS = ("title", "description", "impact")
_TIME_FIELDS = ("scheduled_start_time", "scheduled_end_time", "actual_start_time", "actual_end_time")
_NON_NULLABLE = {"title", "impact", "scheduled_start_time", "scheduled_end_time"}


def _load(db: Session, maintenance_id: int, *, eager: bool = False) -> ScheduledMaintenance:
    q = db.query(ScheduledMaintenance)
    if eager:
        q = q.options(
            selectinload(ScheduledMaintenance.service_links).selectinload(MaintenanceService.service),
            selectinload(ScheduledMaintenance.component_links).selectinload(MaintenanceComponent.component),
            selectinload(ScheduledMaintenance.updates),
        )
    m = q.filter(ScheduledMaintenance.id == int(maintenance_id)).first()
    if not m:
        raise NotFoundError("Maintenance not found")
    return m


def _check_window(start: Optional[datetime], end: Optional[datetime]) -> None:
    issues = []
    if start is None:
        issues.append(validation_issue("scheduledStartTime", "Scheduled start time is required", "missing"))
    if end is None:
        issues.append(validation_issue("scheduledEndTime", "Scheduled end time is required", "missing"))
    if issues:
        raise ValidationError("Scheduled start and end times are required", issues=issues)
    if ensure_utc(start) >= ensure_utc(end):
        raise ValidationError(
            "Scheduled start time must be before end time",
            issues=[validation_issue("scheduledEndTime", "Must be after scheduledStartTime", "invalid_range")],
        )


def default_update_text(status: MaintenanceStatus) -> Dict[str, str]:
    label = status_label(status)
    return {
        "title": f"Maintenance {label}",
        "description": f"Maintenance status changed to {label.lower()}.",
    }


def apply_status(m: ScheduledMaintenance, status: MaintenanceStatus, now: datetime) -> None:
    status = MaintenanceStatus(status)
    current = MaintenanceStatus(m.status) if m.status is not None else None

    if current in TERMINAL_STATUSES and status != current:
        raise ValidationError(
            f"Maintenance is already {current.value}",
            issues=[validation_issue("status", f"Cannot move a {current.value} maintenance to {status.value}", "invalid_transition")],
        )

    m.status = status
    m.updated_at = now
    # actual_start_time solo la primera vez; actual_end_time en cada completed
    if status == MaintenanceStatus.IN_PROGRESS and m.actual_start_time is None:
        m.actual_start_time = now
    if status == MaintenanceStatus.COMPLETED:
        m.actual_end_time = now


def _base_dict(m: ScheduledMaintenance) -> Dict[str, Any]:
    return {
        "id": int(m.id),
        "title": m.title,
        "description": m.description,
        "status": m.status,
        "impact": m.impact,
        "scheduled_start_time": m.scheduled_start_time,
        "scheduled_end_time": m.scheduled_end_time,
        "actual_start_time": m.actual_start_time,
        "actual_end_time": m.actual_end_time,
        "created_at": m.created_at,
        "updated_at": m.updated_at,
    }


def maintenance_summary(m: ScheduledMaintenance) -> Dict[str, Any]:
    updates = newest_first(m.updates)
    out = _base_dict(m)
    out["services"] = affected_services(m.service_links)
    out["latest_update"] = updates[0] if updates else None
    return out


def maintenance_detail(m: ScheduledMaintenance) -> Dict[str, Any]:
    updates = newest_first(m.updates)
    out = maintenance_summary(m)
    out["components"] = affected_components(m.component_links)
    out["updates"] = updates
    return out


def create_maintenance(
    db: Session,
    *,
    title: str,
    scheduled_start_time: Optional[datetime],
    scheduled_end_time: Optional[datetime],
    description: Optional[str] = None,
    impact: Impact = Impact.MINOR,
    service_ids: Sequence[int] = (),
    component_ids: Sequence[int] = (),
    now: Optional[datetime] = None,
) -> ScheduledMaintenance:
    title = (title or "").strip()
    if not title:
        raise ValidationError(
            "title is required",
            issues=[validation_issue("title", "Title is required", "missing")],
        )
    _check_window(scheduled_start_time, scheduled_end_time)
    impact = Impact(impact)
    description = (description or "").strip() or None

    services = load_services(db, service_ids)
    components = load_components(db, component_ids)

    now = now or utc_now()

    m = ScheduledMaintenance(
        title=title,
        description=description,
        status=MaintenanceStatus.SCHEDULED,
        impact=impact,
        scheduled_start_time=ensure_utc(scheduled_start_time),
        scheduled_end_time=ensure_utc(scheduled_end_time),
        created_at=now,
        updated_at=now,
    )
    m.service_links = [MaintenanceService(service=s, impact=impact, created_at=now) for s in services]
    m.component_links = [MaintenanceComponent(component=c, impact=impact, created_at=now) for c in components]
    m.updates = [
        MaintenanceUpdate(
            title=INITIAL_UPDATE_TITLE,
            description=description or f"Scheduled maintenance: {title}",
            status=MaintenanceStatus.SCHEDULED,
            created_at=now,
        )
    ]

    db.add(m)
    db.commit()
    db.refresh(m)

    logger.info(
        "Mantenimiento programado id=%s start=%s end=%s services=%s",
        m.id, m.scheduled_start_time, m.scheduled_end_time, [s.id for s in services],
    )
    return m


def append_update(
    db: Session,
    maintenance_id: int,
    *,
    status: MaintenanceStatus,
    title: Optional[str] = None,
    description: Optional[str] = None,
    now: Optional[datetime] = None,
) -> MaintenanceUpdate:
    status = MaintenanceStatus(status)
    m = _load(db, maintenance_id)
    now = now or utc_now()

    defaults = default_update_text(status)
    apply_status(m, status, now)
    upd = MaintenanceUpdate(
        maintenance=m,
        title=(title or "").strip() or defaults["title"],
        description=(description or "").strip() or defaults["description"],
        status=status,
        created_at=now,
    )
    db.add(upd)
    db.commit()
    db.refresh(upd)

    logger.info("Update en mantenimiento id=%s status=%s", m.id, status.value)
    return upd


def edit_maintenance(
    db: Session,
    maintenance_id: int,
    changes: Dict[str, Any],
    *,
    now: Optional[datetime] = None,
) -> ScheduledMaintenance:
    """
    Edición directa (PUT). Un cambio de status pasa por apply_status con un
    update sintético; los timestamps explícitos se aplican después y mandan.
    """
    m = _load(db, maintenance_id)
    now = now or utc_now()

    data = dict(changes or {})
    new_status = data.pop("status", None)

    # validar la ventana con los valores mezclados antes de tocar nada
    start = data.get("scheduled_start_time") or m.scheduled_start_time
    end = data.get("scheduled_end_time") or m.scheduled_end_time
    _check_window(start, end)

    for k in _TEXT_FIELDS:
        if k not in data:
            continue
        v = data[k]
        if v is None and k in _NON_NULLABLE:
            continue
        if k == "title":
            v = (v or "").strip()
            if not v:
                raise ValidationError(
                    "title is required",
                    issues=[validation_issue("title", "Title is required", "missing")],
                )
        elif k == "description":
            v = (v or "").strip() or None
        elif k == "impact":
            v = Impact(v)
        setattr(m, k, v)

    if new_status is not None and MaintenanceStatus(new_status) != MaintenanceStatus(m.status):
        new_status = MaintenanceStatus(new_status)
        apply_status(m, new_status, now)
        db.add(MaintenanceUpdate(maintenance=m, status=new_status, created_at=now, **default_update_text(new_status)))

    for k in _TIME_FIELDS:
        if k not in data:
            continue
        v = data[k]
        if v is None and k in _NON_NULLABLE:
            continue
        setattr(m, k, ensure_utc(v))

    m.updated_at = now
    db.add(m)
    db.commit()
    db.refresh(m)
    return m


def delete_maintenance(db: Session, maintenance_id: int) -> None:
    m = _load(db, maintenance_id)
    db.delete(m)
    db.commit()
    logger.info("Mantenimiento eliminado id=%s", maintenance_id)


def get_maintenance(db: Session, maintenance_id: int) -> Dict[str, Any]:
    return maintenance_detail(_load(db, maintenance_id, eager=True))


def _summary_query(db: Session):
    return db.query(ScheduledMaintenance).options(
        selectinload(ScheduledMaintenance.service_links).selectinload(MaintenanceService.service),
        selectinload(ScheduledMaintenance.updates),
    )


def list_maintenance(
    db: Session,
    *,
    status: Optional[MaintenanceStatus] = None,
    upcoming: bool = False,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    q = _summary_query(db)
    if status is not None:
        q = q.filter(ScheduledMaintenance.status == MaintenanceStatus(status))
    if upcoming:
        now = now or utc_now()
        q = q.filter(
            or_(
                ScheduledMaintenance.scheduled_start_time >= now,
                ScheduledMaintenance.status == MaintenanceStatus.IN_PROGRESS,
            )
        )
    rows = q.order_by(ScheduledMaintenance.scheduled_start_time.desc(), ScheduledMaintenance.id.desc()).all()
    return [maintenance_summary(m) for m in rows]


def list_upcoming(db: Session, *, limit: Optional[int] = None, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    rows = [
        m for m in list_maintenance(db, upcoming=True, now=now)
        if MaintenanceStatus(m["status"]) in ACTIVE_STATUSES
    ]
    return rows if limit is None else rows[: max(0, int(limit))]


def list_updates(db: Session, maintenance_id: int) -> List[MaintenanceUpdate]:
    _load(db, maintenance_id)
    return (
        db.query(MaintenanceUpdate)
        .filter(MaintenanceUpdate.maintenance_id == int(maintenance_id))
        .order_by(MaintenanceUpdate.created_at.desc(), MaintenanceUpdate.id.desc())
        .all()
    )

# statuspage/services/incident_lifecycle.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session, selectinload

from statuspage.core.enums import Impact, IncidentStatus, status_label
from statuspage.core.errors import NotFoundError, ValidationError, validation_issue
from statuspage.core.timeutils import utc_now
from statuspage.models.incident import Incident
from statuspage.models.incident_component import IncidentComponent
from statuspage.models.incident_service import IncidentService
from statuspage.models.incident_update import IncidentUpdate
from statuspage.services.linking import (
    affected_components,
    affected_services,
    load_components,
    load_services,
    newest_first,
)

logger = logging.getLogger("statuspage.incidents")

INITIAL_UPDATE_TITLE = "Incident Created"
INITIAL_UPDATE_DESCRIPTION = "We are investigating this incident."
STATUS_CHANGE_TITLE = "Status Updated"

# resolved es terminal: reabrir = crear un incidente nuevo
TERMINAL_STATUSES = frozenset({IncidentStatus.RESOLVED})

_EDITABLE_FIELDS = ("title", "description", "impact")
_NON_NULLABLE = {"title", "impact"}


# -----------------------------
# Helpers
# -----------------------------

def _required_text(value: Optional[str], field: str) -> str:
    v = (value or "").strip()
    if not v:
        raise ValidationError(
            f"{field} is required",
            issues=[validation_issue(field, f"{field.capitalize()} is required", "missing")],
        )
    return v


def _load(db: Session, incident_id: int, *, eager: bool = False) -> Incident:
    q = db.query(Incident)
    if eager:
        q = q.options(
            selectinload(Incident.service_links).selectinload(IncidentService.service),
            selectinload(Incident.component_links).selectinload(IncidentComponent.component),
            selectinload(Incident.updates),
        )
    inc = q.filter(Incident.id == int(incident_id)).first()
    if not inc:
        raise NotFoundError("Incident not found")
    return inc


def apply_status(incident: Incident, status: IncidentStatus, now: datetime) -> None:
    """
    Única función que cambia incident.status. La llaman tanto el append de
    updates como la edición directa, así los efectos (updated_at/resolved_at)
    son siempre los mismos.
    """
    status = IncidentStatus(status)
    current = IncidentStatus(incident.status) if incident.status is not None else None

    if current in TERMINAL_STATUSES and status != current:
        raise ValidationError(
            "Resolved incidents cannot be reopened; create a new incident instead",
            issues=[validation_issue("status", f"Cannot move a {current.value} incident to {status.value}", "invalid_transition")],
        )

    incident.status = status
    incident.updated_at = now
    if status == IncidentStatus.RESOLVED:
        incident.resolved_at = now


def _base_dict(inc: Incident) -> Dict[str, Any]:
    return {
        "id": int(inc.id),
        "title": inc.title,
        "description": inc.description,
        "status": inc.status,
        "impact": inc.impact,
        "created_at": inc.created_at,
        "updated_at": inc.updated_at,
        "resolved_at": inc.resolved_at,
    }


def incident_summary(inc: Incident) -> Dict[str, Any]:
    updates = newest_first(inc.updates)
    out = _base_dict(inc)
    out["services"] = affected_services(inc.service_links)
    out["latest_update"] = updates[0] if updates else None
    return out


def incident_detail(inc: Incident) -> Dict[str, Any]:
    updates = newest_first(inc.updates)
    out = _base_dict(inc)
    out["services"] = affected_services(inc.service_links)
    out["components"] = affected_components(inc.component_links)
    out["updates"] = updates
    out["latest_update"] = updates[0] if updates else None
    return out


# -----------------------------
# Operaciones
# -----------------------------

def create_incident(
    db: Session,
    *,
    title: str,
    description: Optional[str] = None,
    impact: Impact = Impact.MINOR,
    service_ids: Sequence[int] = (),
    component_ids: Sequence[int] = (),
    now: Optional[datetime] = None,
) -> Incident:
    title = _required_text(title, "title")
    impact = Impact(impact)
    description = (description or "").strip() or None

    services = load_services(db, service_ids)
    components = load_components(db, component_ids)

    now = now or utc_now()

    inc = Incident(
        title=title,
        description=description,
        status=IncidentStatus.INVESTIGATING,
        impact=impact,
        created_at=now,
        updated_at=now,
    )
    # cada link hereda el impacto del incidente; después puede divergir
    inc.service_links = [IncidentService(service=s, impact=impact, created_at=now) for s in services]
    inc.component_links = [IncidentComponent(component=c, impact=impact, created_at=now) for c in components]
    inc.updates = [
        IncidentUpdate(
            title=INITIAL_UPDATE_TITLE,
            description=description or INITIAL_UPDATE_DESCRIPTION,
            status=IncidentStatus.INVESTIGATING,
            created_at=now,
        )
    ]

    # incidente + links + update inicial: un solo commit
    db.add(inc)
    db.commit()
    db.refresh(inc)

    logger.info(
        "Incidente creado id=%s impact=%s services=%s components=%s",
        inc.id, impact.value, [s.id for s in services], [c.id for c in components],
    )
    return inc


def append_update(
    db: Session,
    incident_id: int,
    *,
    title: str,
    description: str,
    status: IncidentStatus,
    now: Optional[datetime] = None,
) -> IncidentUpdate:
    title = _required_text(title, "title")
    description = _required_text(description, "description")
    status = IncidentStatus(status)

    inc = _load(db, incident_id)
    now = now or utc_now()

    apply_status(inc, status, now)
    upd = IncidentUpdate(
        incident=inc,
        title=title,
        description=description,
        status=status,
        created_at=now,
    )
    db.add(upd)
    db.commit()
    db.refresh(upd)

    logger.info("Update en incidente id=%s status=%s", inc.id, status.value)
    return upd


def edit_incident(
    db: Session,
    incident_id: int,
    changes: Dict[str, Any],
    *,
    now: Optional[datetime] = None,
) -> Incident:
    """
    Edición directa (PUT). Si `changes` trae un status distinto del actual, el
    cambio se registra como IncidentUpdate sintético para que el status del
    incidente siga siendo el del update más reciente.
    """
    inc = _load(db, incident_id)
    now = now or utc_now()

    data = dict(changes or {})
    new_status = data.pop("status", None)

    for k in _EDITABLE_FIELDS:
        if k not in data:
            continue
        v = data[k]
        if v is None and k in _NON_NULLABLE:
            continue
        if k == "title":
            v = _required_text(v, "title")
        elif k == "description":
            v = (v or "").strip() or None
        elif k == "impact":
            v = Impact(v)
        setattr(inc, k, v)

    if new_status is not None and IncidentStatus(new_status) != IncidentStatus(inc.status):
        new_status = IncidentStatus(new_status)
        apply_status(inc, new_status, now)
        db.add(
            IncidentUpdate(
                incident=inc,
                title=STATUS_CHANGE_TITLE,
                description=f"Incident status changed to {status_label(new_status)}.",
                status=new_status,
                created_at=now,
            )
        )

    inc.updated_at = now
    db.add(inc)
    db.commit()
    db.refresh(inc)
    return inc


def get_incident(db: Session, incident_id: int) -> Dict[str, Any]:
    return incident_detail(_load(db, incident_id, eager=True))


def list_incidents(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(Incident)
        .options(
            selectinload(Incident.service_links).selectinload(IncidentService.service),
            selectinload(Incident.updates),
        )
        .order_by(Incident.created_at.desc(), Incident.id.desc())
        .all()
    )
    return [incident_summary(inc) for inc in rows]


def list_updates(db: Session, incident_id: int) -> List[IncidentUpdate]:
    _load(db, incident_id)
    return (
        db.query(IncidentUpdate)
        .filter(IncidentUpdate.incident_id == int(incident_id))
        .order_by(IncidentUpdate.created_at.desc(), IncidentUpdate.id.desc())
        .all()
    )


def select_public_incidents(
    incidents: Sequence[Dict[str, Any]],
    *,
    max_total: int = 5,
    max_resolved: int = 3,
) -> List[Dict[str, Any]]:
    """Activos primero, luego los resueltos más recientes; la lista ya viene newest-first."""
    active = [i for i in incidents if IncidentStatus(i["status"]) != IncidentStatus.RESOLVED]
    resolved = [i for i in incidents if IncidentStatus(i["status"]) == IncidentStatus.RESOLVED]
    return (active + resolved[: max(0, int(max_resolved))])[: max(0, int(max_total))]

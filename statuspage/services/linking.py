# statuspage/services/linking.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

from sqlalchemy.orm import Session

from statuspage.core.errors import ValidationError, validation_issue
from statuspage.core.timeutils import ensure_utc
from statuspage.models.component import Component
from statuspage.models.service import Service


def _unique_ids(ids: Iterable[Any]) -> List[int]:
    seen: List[int] = []
    for x in ids or []:
        i = int(x)
        if i not in seen:
            seen.append(i)
    return seen


def load_services(db: Session, ids: Sequence[int], *, field: str = "serviceIds") -> List[Service]:
    wanted = _unique_ids(ids)
    if not wanted:
        return []
    rows = db.query(Service).filter(Service.id.in_(wanted)).all()
    by_id = {int(r.id): r for r in rows}
    missing = [i for i in wanted if i not in by_id]
    if missing:
        raise ValidationError(
            "Unknown service ids",
            issues=[validation_issue(field, f"Service {i} does not exist", "not_found") for i in missing],
        )
    return [by_id[i] for i in wanted]


def load_components(db: Session, ids: Sequence[int], *, field: str = "componentIds") -> List[Component]:
    wanted = _unique_ids(ids)
    if not wanted:
        return []
    rows = db.query(Component).filter(Component.id.in_(wanted)).all()
    by_id = {int(r.id): r for r in rows}
    missing = [i for i in wanted if i not in by_id]
    if missing:
        raise ValidationError(
            "Unknown component ids",
            issues=[validation_issue(field, f"Component {i} does not exist", "not_found") for i in missing],
        )
    return [by_id[i] for i in wanted]


def affected_services(links: Iterable[Any]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for link in sorted(links, key=lambda l: int(l.id)):
        svc = link.service
        out.append(
            {
                "id": int(svc.id),
                "name": svc.name,
                "description": svc.description,
                "status": svc.status,
                "url": svc.url,
                "impact": link.impact,
            }
        )
    return out


def affected_components(links: Iterable[Any]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for link in sorted(links, key=lambda l: int(l.id)):
        comp = link.component
        out.append(
            {
                "id": int(comp.id),
                "service_id": int(comp.service_id),
                "name": comp.name,
                "status": comp.status,
                "impact": link.impact,
            }
        )
    return out


def newest_first(updates: Iterable[Any]) -> List[Any]:
    # created_at puede empatar (mismo instante); el id desempata
    return sorted(
        updates,
        key=lambda u: (ensure_utc(u.created_at), int(u.id or 0)),
        reverse=True,
    )

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from statuspage.core.enums import IncidentStatus
from statuspage.db import get_db
from statuspage.models.incident import Incident
from statuspage.models.service import Service
from statuspage.routers.services import with_visible_components
from statuspage.schemas.status import OverviewOut, PublicStatusOut
from statuspage.services import incident_lifecycle, maintenance_lifecycle
from statuspage.services.settings_service import DEFAULT_SETTINGS, settings_service
from statuspage.services.status_aggregator import aggregate_status, count_by_status

router = APIRouter(prefix="/status", tags=["Status"])


def _visible_services(db: Session):
    return (
        db.query(Service)
        .options(selectinload(Service.components))
        .filter(Service.is_visible.is_(True))
        .order_by(Service.order.asc(), Service.name.asc())
        .all()
    )


def _limit(db: Session, key: str) -> int:
    return settings_service.get_int(db, key, DEFAULT_SETTINGS[key]["value"])


@router.get("", response_model=PublicStatusOut)
def public_status(db: Session = Depends(get_db)):
    services = _visible_services(db)
    overall = aggregate_status(services)

    incidents = incident_lifecycle.select_public_incidents(
        incident_lifecycle.list_incidents(db),
        max_total=_limit(db, "maxIncidents"),
        max_resolved=_limit(db, "maxResolvedIncidents"),
    )
    maintenance = maintenance_lifecycle.list_upcoming(db, limit=_limit(db, "maxMaintenance"))

    return {
        "site_title": settings_service.get(db, "siteTitle", DEFAULT_SETTINGS["siteTitle"]["value"]),
        "site_description": settings_service.get(
            db, "siteDescription", DEFAULT_SETTINGS["siteDescription"]["value"]
        ),
        "overall": {"status": overall.status, "text": overall.text},
        "services": [with_visible_components(s) for s in services],
        "incidents": incidents,
        "maintenance": maintenance,
    }


@router.get("/overview", response_model=OverviewOut)
def status_overview(db: Session = Depends(get_db)):
    services = db.query(Service).all()
    overall = aggregate_status(services)

    active_incidents = (
        db.query(Incident)
        .filter(Incident.status != IncidentStatus.RESOLVED)
        .count()
    )

    return {
        "overall": {"status": overall.status, "text": overall.text},
        "services_total": len(services),
        "services_by_status": count_by_status(services),
        "active_incidents": active_incidents,
        "upcoming_maintenance": len(maintenance_lifecycle.list_upcoming(db)),
    }

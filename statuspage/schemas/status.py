from __future__ import annotations

from typing import Dict, List

from pydantic import Field

from statuspage.core.enums import ServiceStatus
from statuspage.schemas.base import CamelModel
from statuspage.schemas.incident import IncidentSummary
from statuspage.schemas.maintenance import MaintenanceSummary
from statuspage.schemas.service import ServiceWithComponents


class OverallStatusOut(CamelModel):
    status: ServiceStatus
    text: str


class PublicStatusOut(CamelModel):
    site_title: str
    site_description: str
    overall: OverallStatusOut
    services: List[ServiceWithComponents] = Field(default_factory=list)
    incidents: List[IncidentSummary] = Field(default_factory=list)
    maintenance: List[MaintenanceSummary] = Field(default_factory=list)


class OverviewOut(CamelModel):
    overall: OverallStatusOut
    services_total: int
    services_by_status: Dict[str, int]
    active_incidents: int
    upcoming_maintenance: int

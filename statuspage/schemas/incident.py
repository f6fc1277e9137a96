from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from statuspage.core.enums import Impact, IncidentStatus, ServiceStatus
from statuspage.schemas.base import CamelModel, NonBlankStr, UTCDateTime


class IncidentCreate(CamelModel):
    title: NonBlankStr = Field(..., max_length=255)
    description: Optional[str] = None
    impact: Impact = Impact.MINOR
    service_ids: List[int] = Field(default_factory=list)
    component_ids: List[int] = Field(default_factory=list)


class IncidentEdit(CamelModel):
    title: Optional[NonBlankStr] = Field(default=None, max_length=255)
    description: Optional[str] = None
    # si viene y cambia, se registra como IncidentUpdate sintético
    status: Optional[IncidentStatus] = None
    impact: Optional[Impact] = None


class IncidentUpdateCreate(CamelModel):
    title: NonBlankStr = Field(..., max_length=255)
    description: NonBlankStr
    status: IncidentStatus


class IncidentUpdateOut(CamelModel):
    id: int
    incident_id: int
    title: str
    description: str
    status: IncidentStatus
    created_at: UTCDateTime


class AffectedService(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    status: ServiceStatus
    url: Optional[str] = None
    impact: Impact


class AffectedComponent(CamelModel):
    id: int
    service_id: int
    name: str
    status: ServiceStatus
    impact: Impact


class IncidentOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: IncidentStatus
    impact: Impact
    created_at: UTCDateTime
    updated_at: UTCDateTime
    resolved_at: Optional[UTCDateTime] = None


class IncidentSummary(IncidentOut):
    services: List[AffectedService] = Field(default_factory=list)
    latest_update: Optional[IncidentUpdateOut] = None


class IncidentDetail(IncidentSummary):
    components: List[AffectedComponent] = Field(default_factory=list)
    updates: List[IncidentUpdateOut] = Field(default_factory=list)

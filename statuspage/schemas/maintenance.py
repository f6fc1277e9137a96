from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from statuspage.core.enums import Impact, MaintenanceStatus
from statuspage.schemas.base import CamelModel, NonBlankStr, UTCDateTime
from statuspage.schemas.incident import AffectedComponent, AffectedService


class MaintenanceCreate(CamelModel):
    title: NonBlankStr = Field(..., max_length=255)
    description: Optional[str] = None
    impact: Impact = Impact.MINOR
    scheduled_start_time: UTCDateTime
    scheduled_end_time: UTCDateTime
    service_ids: List[int] = Field(default_factory=list)
    component_ids: List[int] = Field(default_factory=list)


class MaintenanceEdit(CamelModel):
    title: Optional[NonBlankStr] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[MaintenanceStatus] = None
    impact: Optional[Impact] = None
    scheduled_start_time: Optional[UTCDateTime] = None
    scheduled_end_time: Optional[UTCDateTime] = None
    actual_start_time: Optional[UTCDateTime] = None
    actual_end_time: Optional[UTCDateTime] = None


class MaintenanceUpdateCreate(CamelModel):
    # title/description opcionales: se rellenan a partir del status
    title: Optional[NonBlankStr] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: MaintenanceStatus


class MaintenanceUpdateOut(CamelModel):
    id: int
    maintenance_id: int
    title: str
    description: str
    status: MaintenanceStatus
    created_at: UTCDateTime


class MaintenanceOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: MaintenanceStatus
    impact: Impact
    scheduled_start_time: UTCDateTime
    scheduled_end_time: UTCDateTime
    actual_start_time: Optional[UTCDateTime] = None
    actual_end_time: Optional[UTCDateTime] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class MaintenanceSummary(MaintenanceOut):
    services: List[AffectedService] = Field(default_factory=list)
    latest_update: Optional[MaintenanceUpdateOut] = None


class MaintenanceDetail(MaintenanceSummary):
    components: List[AffectedComponent] = Field(default_factory=list)
    updates: List[MaintenanceUpdateOut] = Field(default_factory=list)

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator

from statuspage.core.enums import ServiceStatus
from statuspage.schemas.base import CamelModel, NonBlankStr, UTCDateTime


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


def _check_url(v: Optional[str]) -> Optional[str]:
    v = _blank_to_none(v)
    if v is not None and not v.lower().startswith(("http://", "https://")):
        raise ValueError("url must start with http:// or https://")
    return v


class ComponentCreate(CamelModel):
    name: NonBlankStr = Field(..., max_length=255)
    description: Optional[str] = None
    status: ServiceStatus = ServiceStatus.OPERATIONAL
    order: int = 0
    is_visible: bool = True


class ComponentUpdate(CamelModel):
    name: Optional[NonBlankStr] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[ServiceStatus] = None
    order: Optional[int] = None
    is_visible: Optional[bool] = None


class ComponentOut(CamelModel):
    id: int
    service_id: int
    name: str
    description: Optional[str] = None
    status: ServiceStatus
    order: int
    is_visible: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class ServiceCreate(CamelModel):
    name: NonBlankStr = Field(..., max_length=255)
    description: Optional[str] = None
    status: ServiceStatus = ServiceStatus.OPERATIONAL
    url: Optional[str] = Field(default=None, max_length=500)
    order: int = 0
    is_visible: bool = True

    @field_validator("url")
    @classmethod
    def check_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class ServiceUpdate(CamelModel):
    name: Optional[NonBlankStr] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[ServiceStatus] = None
    url: Optional[str] = Field(default=None, max_length=500)
    order: Optional[int] = None
    is_visible: Optional[bool] = None
    # nota opcional que se guarda en el historial si cambia el status
    status_message: Optional[str] = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class ServiceOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    status: ServiceStatus
    url: Optional[str] = None
    order: int
    is_visible: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class ServiceWithComponents(ServiceOut):
    components: List[ComponentOut] = Field(default_factory=list)


class ServiceStatusHistoryOut(CamelModel):
    id: int
    service_id: int
    status: ServiceStatus
    message: Optional[str] = None
    created_at: UTCDateTime

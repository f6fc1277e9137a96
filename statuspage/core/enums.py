# statuspage/core/enums.py
from enum import Enum
from typing import Dict, FrozenSet, Type

from sqlalchemy import Enum as SAEnum


class ServiceStatus(str, Enum):
    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    PARTIAL_OUTAGE = "partial_outage"
    MAJOR_OUTAGE = "major_outage"


class IncidentStatus(str, Enum):
    INVESTIGATING = "investigating"
    IDENTIFIED = "identified"
    MONITORING = "monitoring"
    RESOLVED = "resolved"


class Impact(str, Enum):
    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class MaintenanceStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SettingType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class Role(str, Enum):
    ADMIN = "admin"


class Capability(str, Enum):
    MANAGE_STATUS = "status:write"        # services, components, incidents, maintenance
    MANAGE_SETTINGS = "settings:write"
    MANAGE_DATABASE = "database:write"    # export/import/reset


ROLE_CAPABILITIES: Dict[str, FrozenSet[Capability]] = {
    Role.ADMIN.value: frozenset(Capability),
}


def capabilities_for(role: str) -> FrozenSet[Capability]:
    return ROLE_CAPABILITIES.get((role or "").strip().lower(), frozenset())


# Orden de severidad (mayor = peor) para el banner público
SERVICE_STATUS_SEVERITY: Dict[ServiceStatus, int] = {
    ServiceStatus.OPERATIONAL: 0,
    ServiceStatus.DEGRADED: 1,
    ServiceStatus.PARTIAL_OUTAGE: 2,
    ServiceStatus.MAJOR_OUTAGE: 3,
}

STATUS_LABELS: Dict[str, str] = {
    "operational": "Operational",
    "degraded": "Degraded Performance",
    "partial_outage": "Partial Outage",
    "major_outage": "Major Outage",
    "investigating": "Investigating",
    "identified": "Identified",
    "monitoring": "Monitoring",
    "resolved": "Resolved",
    "scheduled": "Scheduled",
    "in_progress": "In Progress",
    "completed": "Completed",
    "cancelled": "Cancelled",
}


def status_label(status: str) -> str:
    value = getattr(status, "value", status)
    return STATUS_LABELS.get(value, value)


def enum_type(enum_cls: Type[Enum], name: str) -> SAEnum:
    """
    Tipo de columna restringido a los literales del enum (ENUM nativo en
    Postgres, CHECK en SQLite). Se guarda el value, no el nombre del miembro.
    """
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda e: [m.value for m in e],
        create_constraint=True,
        validate_strings=True,
    )

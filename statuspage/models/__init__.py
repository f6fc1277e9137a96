# statuspage/models/__init__.py

from statuspage.models.user import User
from statuspage.models.service import Service
from statuspage.models.component import Component
from statuspage.models.service_status_history import ServiceStatusHistory
from statuspage.models.incident import Incident
from statuspage.models.incident_update import IncidentUpdate
from statuspage.models.incident_service import IncidentService
from statuspage.models.incident_component import IncidentComponent
from statuspage.models.maintenance import ScheduledMaintenance
from statuspage.models.maintenance_update import MaintenanceUpdate
from statuspage.models.maintenance_service import MaintenanceService
from statuspage.models.maintenance_component import MaintenanceComponent
from statuspage.models.setting import Setting


__all__ = [
    "User",
    "Service",
    "Component",
    "ServiceStatusHistory",
    "Incident",
    "IncidentUpdate",
    "IncidentService",
    "IncidentComponent",
    "ScheduledMaintenance",
    "MaintenanceUpdate",
    "MaintenanceService",
    "MaintenanceComponent",
    "Setting",
]

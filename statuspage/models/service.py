from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from statuspage.core.enums import ServiceStatus, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        enum_type(ServiceStatus, "service_status"),
        nullable=False,
        default=ServiceStatus.OPERATIONAL,
    )
    url = Column(String(500), nullable=True)

    order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    # borrar un servicio borra también su historial de asociación con incidentes/mantenimientos
    components = relationship(
        "Component",
        back_populates="service",
        cascade="all, delete-orphan",
    )
    status_history = relationship(
        "ServiceStatusHistory",
        back_populates="service",
        cascade="all, delete-orphan",
    )
    incident_links = relationship(
        "IncidentService",
        back_populates="service",
        cascade="all, delete-orphan",
    )
    maintenance_links = relationship(
        "MaintenanceService",
        back_populates="service",
        cascade="all, delete-orphan",
    )

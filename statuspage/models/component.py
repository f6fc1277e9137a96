from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from statuspage.core.enums import ServiceStatus, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class Component(Base):
    __tablename__ = "components"

    id = Column(Integer, primary_key=True, autoincrement=True)

    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        enum_type(ServiceStatus, "service_status"),
        nullable=False,
        default=ServiceStatus.OPERATIONAL,
    )

    order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    service = relationship("Service", back_populates="components")
    incident_links = relationship(
        "IncidentComponent",
        back_populates="component",
        cascade="all, delete-orphan",
    )
    maintenance_links = relationship(
        "MaintenanceComponent",
        back_populates="component",
        cascade="all, delete-orphan",
    )

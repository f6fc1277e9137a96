from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from statuspage.core.enums import Impact, IncidentStatus, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class Incident(Base):
    __tablename__ = "incidents"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # siempre igual al status del IncidentUpdate más reciente
    status = Column(
        enum_type(IncidentStatus, "incident_status"),
        nullable=False,
        default=IncidentStatus.INVESTIGATING,
    )
    impact = Column(enum_type(Impact, "incident_impact"), nullable=False, default=Impact.MINOR)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    updates = relationship(
        "IncidentUpdate",
        back_populates="incident",
        cascade="all, delete-orphan",
    )
    service_links = relationship(
        "IncidentService",
        back_populates="incident",
        cascade="all, delete-orphan",
    )
    component_links = relationship(
        "IncidentComponent",
        back_populates="incident",
        cascade="all, delete-orphan",
    )

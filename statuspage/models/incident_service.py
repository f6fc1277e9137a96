from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from statuspage.core.enums import Impact, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class IncidentService(Base):
    __tablename__ = "incident_services"

    id = Column(Integer, primary_key=True, autoincrement=True)

    incident_id = Column(Integer, ForeignKey("incidents.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)

    # impacto de este servicio en concreto, independiente del impacto global del incidente
    impact = Column(enum_type(Impact, "incident_impact"), nullable=False, default=Impact.MINOR)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    incident = relationship("Incident", back_populates="service_links")
    service = relationship("Service", back_populates="incident_links")

    __table_args__ = (
        UniqueConstraint("incident_id", "service_id", name="uq_incident_service"),
    )

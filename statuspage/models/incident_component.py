from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from statuspage.core.enums import Impact, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class IncidentComponent(Base):
    __tablename__ = "incident_components"

    id = Column(Integer, primary_key=True, autoincrement=True)

    incident_id = Column(Integer, ForeignKey("incidents.id", ondelete="CASCADE"), nullable=False, index=True)
    component_id = Column(Integer, ForeignKey("components.id", ondelete="CASCADE"), nullable=False, index=True)

    impact = Column(enum_type(Impact, "incident_impact"), nullable=False, default=Impact.MINOR)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    incident = relationship("Incident", back_populates="component_links")
    component = relationship("Component", back_populates="incident_links")

    __table_args__ = (
        UniqueConstraint("incident_id", "component_id", name="uq_incident_component"),
    )

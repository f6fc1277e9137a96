from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from statuspage.core.enums import Impact, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class MaintenanceComponent(Base):
    __tablename__ = "maintenance_components"

    id = Column(Integer, primary_key=True, autoincrement=True)

    maintenance_id = Column(
        Integer,
        ForeignKey("scheduled_maintenance.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    component_id = Column(Integer, ForeignKey("components.id", ondelete="CASCADE"), nullable=False, index=True)

    impact = Column(enum_type(Impact, "incident_impact"), nullable=False, default=Impact.MINOR)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    maintenance = relationship("ScheduledMaintenance", back_populates="component_links")
    component = relationship("Component", back_populates="maintenance_links")

    __table_args__ = (
        UniqueConstraint("maintenance_id", "component_id", name="uq_maintenance_component"),
    )

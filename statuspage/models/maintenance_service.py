from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from statuspage.core.enums import Impact, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class MaintenanceService(Base):
    __tablename__ = "maintenance_services"

    id = Column(Integer, primary_key=True, autoincrement=True)

    maintenance_id = Column(
        Integer,
        ForeignKey("scheduled_maintenance.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)

    impact = Column(enum_type(Impact, "incident_impact"), nullable=False, default=Impact.MINOR)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    maintenance = relationship("ScheduledMaintenance", back_populates="service_links")
    service = relationship("Service", back_populates="maintenance_links")

    __table_args__ = (
        UniqueConstraint("maintenance_id", "service_id", name="uq_maintenance_service"),
    )

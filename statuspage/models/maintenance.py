from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from statuspage.core.enums import Impact, MaintenanceStatus, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class ScheduledMaintenance(Base):
    __tablename__ = "scheduled_maintenance"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    status = Column(
        enum_type(MaintenanceStatus, "maintenance_status"),
        nullable=False,
        default=MaintenanceStatus.SCHEDULED,
    )
    impact = Column(enum_type(Impact, "incident_impact"), nullable=False, default=Impact.MINOR)

    scheduled_start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    scheduled_end_time = Column(DateTime(timezone=True), nullable=False)

    # actual_start_time: primera vez que pasa a in_progress; actual_end_time: cada paso a completed
    actual_start_time = Column(DateTime(timezone=True), nullable=True)
    actual_end_time = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    updates = relationship(
        "MaintenanceUpdate",
        back_populates="maintenance",
        cascade="all, delete-orphan",
    )
    service_links = relationship(
        "MaintenanceService",
        back_populates="maintenance",
        cascade="all, delete-orphan",
    )
    component_links = relationship(
        "MaintenanceComponent",
        back_populates="maintenance",
        cascade="all, delete-orphan",
    )

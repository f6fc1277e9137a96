from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from statuspage.core.enums import MaintenanceStatus, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class MaintenanceUpdate(Base):
    __tablename__ = "maintenance_updates"

    id = Column(Integer, primary_key=True, autoincrement=True)

    maintenance_id = Column(
        Integer,
        ForeignKey("scheduled_maintenance.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(enum_type(MaintenanceStatus, "maintenance_status"), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    maintenance = relationship("ScheduledMaintenance", back_populates="updates")

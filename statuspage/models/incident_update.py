from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from statuspage.core.enums import IncidentStatus, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class IncidentUpdate(Base):
    __tablename__ = "incident_updates"

    id = Column(Integer, primary_key=True, autoincrement=True)

    incident_id = Column(Integer, ForeignKey("incidents.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(enum_type(IncidentStatus, "incident_status"), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    incident = relationship("Incident", back_populates="updates")

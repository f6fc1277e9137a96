from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from statuspage.core.enums import ServiceStatus, enum_type
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class ServiceStatusHistory(Base):
    """Una fila por cada cambio de status de un servicio (incluida la creación)."""
    __tablename__ = "service_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)

    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(enum_type(ServiceStatus, "service_status"), nullable=False)
    message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    service = relationship("Service", back_populates="status_history")

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text

from statuspage.core.enums import SettingType
from statuspage.core.timeutils import utc_now
from statuspage.db import Base


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    key = Column(String(255), unique=True, index=True, nullable=False)
    # texto serializado según `type` (ver services/settings_service.py)
    value = Column(Text, nullable=False, default="")
    type = Column(String(50), nullable=False, default=SettingType.STRING.value)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

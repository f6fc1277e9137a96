from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field

from statuspage.core.enums import SettingType
from statuspage.schemas.base import CamelModel, NonBlankStr, UTCDateTime


class SettingValueIn(CamelModel):
    value: Any = Field(...)
    type: SettingType = SettingType.STRING
    description: Optional[str] = None


class SettingIn(SettingValueIn):
    key: NonBlankStr = Field(..., max_length=255)


class SettingsBatchIn(CamelModel):
    settings: Dict[str, SettingValueIn]


class SettingOut(CamelModel):
    value: Any = None
    # str: un import puede traer tipos que no conocemos
    type: str
    description: Optional[str] = None
    updated_at: Optional[UTCDateTime] = None

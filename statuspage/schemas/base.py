from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from statuspage.core.timeutils import ensure_utc


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]
NonBlankStr = Annotated[str, AfterValidator(_non_blank)]


class CamelModel(BaseModel):
    """El JSON de la API va en camelCase; en Python seguimos con snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel


class DatabaseActionIn(BaseModel):
    action: Literal["export", "import", "reset"]
    # documento completo de export ({version, exportedAt, data}) para action=import
    data: Optional[Dict[str, Any]] = None

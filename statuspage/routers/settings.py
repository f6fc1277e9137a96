from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from statuspage.db import get_db
from statuspage.models.user import User
from statuspage.routers.auth import require_settings_writer
from statuspage.schemas.setting import SettingIn, SettingOut, SettingsBatchIn
from statuspage.services.settings_service import read_value, settings_service

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=Dict[str, SettingOut])
def get_settings(db: Session = Depends(get_db)):
    return settings_service.get_all(db)


@router.post("", response_model=Dict[str, SettingOut])
def upsert_setting(
    payload: SettingIn,
    db: Session = Depends(get_db),
    _: User = Depends(require_settings_writer),
):
    row = settings_service.set(
        db,
        payload.key,
        payload.value,
        payload.type,
        payload.description,
    )
    return {
        row.key: {
            "value": read_value(row),
            "type": row.type,
            "description": row.description,
            "updated_at": row.updated_at,
        }
    }


@router.put("", response_model=Dict[str, SettingOut])
def upsert_settings(
    payload: SettingsBatchIn,
    db: Session = Depends(get_db),
    _: User = Depends(require_settings_writer),
):
    updates = {
        key: item.model_dump(exclude_unset=True)
        for key, item in payload.settings.items()
    }
    settings_service.set_many(db, updates)
    return settings_service.get_all(db)

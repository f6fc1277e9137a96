# statuspage/services/settings_service.py
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Mapping, Optional, Type

from sqlalchemy.orm import Session

from statuspage.core.enums import SettingType
from statuspage.core.errors import ValidationError, validation_issue
from statuspage.core.timeutils import utc_now
from statuspage.models.setting import Setting

logger = logging.getLogger("statuspage.settings")


# -------------------------------------------------------------------
# Valores tipados: cada variante sabe pasar a texto (columna value) y volver.
# -------------------------------------------------------------------

@dataclass(frozen=True)
class SettingValue:
    type: ClassVar[SettingType]
    value: Any

    @classmethod
    def coerce(cls, raw: Any) -> "SettingValue":
        raise NotImplementedError

    def serialize(self) -> str:
        raise NotImplementedError

    @classmethod
    def deserialize(cls, text: str) -> "SettingValue":
        raise NotImplementedError


@dataclass(frozen=True)
class StringValue(SettingValue):
    type: ClassVar[SettingType] = SettingType.STRING
    value: str

    @classmethod
    def coerce(cls, raw: Any) -> "StringValue":
        if not isinstance(raw, str):
            raise TypeError("expected a string")
        return cls(raw)

    def serialize(self) -> str:
        return self.value

    @classmethod
    def deserialize(cls, text: str) -> "StringValue":
        return cls(text or "")


@dataclass(frozen=True)
class NumberValue(SettingValue):
    type: ClassVar[SettingType] = SettingType.NUMBER
    value: float

    @classmethod
    def coerce(cls, raw: Any) -> "NumberValue":
        # bool es subclase de int: no cuenta como número
        if isinstance(raw, bool):
            raise TypeError("expected a number")
        if isinstance(raw, float) and not math.isfinite(raw):
            raise ValueError("expected a finite number")
        if isinstance(raw, (int, float)):
            return cls(raw)
        if isinstance(raw, str) and raw.strip():
            return cls.deserialize(raw.strip())
        raise TypeError("expected a number")

    def serialize(self) -> str:
        return str(self.value)

    @classmethod
    def deserialize(cls, text: str) -> "NumberValue":
        f = float(text)
        # inf/nan no se serializan a JSON
        if not math.isfinite(f):
            raise ValueError(f"non-finite number: {text}")
        return cls(int(f) if f.is_integer() and "." not in text and "e" not in text.lower() else f)


@dataclass(frozen=True)
class BooleanValue(SettingValue):
    type: ClassVar[SettingType] = SettingType.BOOLEAN
    value: bool

    @classmethod
    def coerce(cls, raw: Any) -> "BooleanValue":
        if isinstance(raw, bool):
            return cls(raw)
        if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
            return cls(raw.strip().lower() == "true")
        raise TypeError("expected a boolean")

    def serialize(self) -> str:
        return "true" if self.value else "false"

    @classmethod
    def deserialize(cls, text: str) -> "BooleanValue":
        return cls((text or "").strip().lower() == "true")


@dataclass(frozen=True)
class JsonValue(SettingValue):
    type: ClassVar[SettingType] = SettingType.JSON
    value: Any

    @classmethod
    def coerce(cls, raw: Any) -> "JsonValue":
        # debe poder serializarse tal cual
        json.dumps(raw)
        return cls(raw)

    def serialize(self) -> str:
        return json.dumps(self.value)

    @classmethod
    def deserialize(cls, text: str) -> "JsonValue":
        return cls(json.loads(text) if text else None)


VARIANTS: Dict[SettingType, Type[SettingValue]] = {
    SettingType.STRING: StringValue,
    SettingType.NUMBER: NumberValue,
    SettingType.BOOLEAN: BooleanValue,
    SettingType.JSON: JsonValue,
}


def make_value(raw: Any, type_: SettingType, *, key: str = "value") -> SettingValue:
    t = SettingType(type_)
    if raw is None:
        raise ValidationError(
            f"Setting {key} requires a value",
            issues=[validation_issue(f"settings.{key}.value", "Value is required", "missing")],
        )
    try:
        return VARIANTS[t].coerce(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Setting {key} does not match type {t.value}",
            issues=[validation_issue(f"settings.{key}.value", f"Value does not match type {t.value}: {e}", "type_error")],
        )


def read_value(row: Setting) -> Any:
    """Texto de la BD -> valor Python según row.type. Basura en BD = string crudo."""
    try:
        t = SettingType(row.type)
    except ValueError:
        return row.value
    try:
        return VARIANTS[t].deserialize(row.value).value
    except ValueError:
        logger.warning("Setting %s con valor inválido para type=%s", row.key, row.type)
        return row.value


# Defaults sembrados al arrancar (si no existen)
DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    "siteTitle": {"value": "System Status", "type": SettingType.STRING, "description": "Public page title"},
    "siteDescription": {
        "value": "Current status of all our services",
        "type": SettingType.STRING,
        "description": "Public page subtitle",
    },
    "companyName": {"value": "", "type": SettingType.STRING, "description": "Company name"},
    "supportUrl": {"value": "", "type": SettingType.STRING, "description": "Support link"},
    "emailIncidents": {"value": False, "type": SettingType.BOOLEAN, "description": "Email on new incidents"},
    "emailUpdates": {"value": False, "type": SettingType.BOOLEAN, "description": "Email on incident updates"},
    "emailResolved": {"value": False, "type": SettingType.BOOLEAN, "description": "Email on resolution"},
    "webhookUrl": {"value": "", "type": SettingType.STRING, "description": "Webhook endpoint"},
    "maxIncidents": {"value": 5, "type": SettingType.NUMBER, "description": "Incidents shown on the public page"},
    "maxResolvedIncidents": {
        "value": 3,
        "type": SettingType.NUMBER,
        "description": "Resolved incidents shown on the public page",
    },
    "maxMaintenance": {"value": 3, "type": SettingType.NUMBER, "description": "Maintenance windows shown on the public page"},
}


class SettingsService:
    """Lectura/escritura de la tabla settings (sin cache por proceso)."""

    def _row(self, db: Session, key: str) -> Optional[Setting]:
        return db.query(Setting).filter(Setting.key == key).first()

    def get_all(self, db: Session) -> Dict[str, Dict[str, Any]]:
        out: Dict[str, Dict[str, Any]] = {}
        for row in db.query(Setting).order_by(Setting.key.asc()).all():
            out[row.key] = {
                "value": read_value(row),
                "type": row.type,
                "description": row.description,
                "updated_at": row.updated_at,
            }
        return out

    def get(self, db: Session, key: str, default: Any = None) -> Any:
        row = self._row(db, (key or "").strip())
        return read_value(row) if row else default

    def get_int(self, db: Session, key: str, default: int) -> int:
        v = self.get(db, key, default)
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return int(default)
        if isinstance(v, float) and not math.isfinite(v):
            return int(default)
        return int(v)

    def _upsert(
        self,
        db: Session,
        key: str,
        raw: Any,
        type_: SettingType,
        description: Optional[str],
        now: datetime,
    ) -> Setting:
        k = (key or "").strip()
        if not k:
            raise ValidationError("Setting key is required", issues=[validation_issue("key", "Key is required", "missing")])

        v = make_value(raw, type_, key=k)
        row = self._row(db, k)
        if not row:
            row = Setting(key=k, created_at=now)
            db.add(row)
        row.value = v.serialize()
        row.type = v.type.value
        if description is not None:
            row.description = description
        row.updated_at = now
        return row

    def set(
        self,
        db: Session,
        key: str,
        value: Any,
        type_: SettingType = SettingType.STRING,
        description: Optional[str] = None,
    ) -> Setting:
        row = self._upsert(db, key, value, type_, description, utc_now())
        db.commit()
        db.refresh(row)
        logger.info("Setting actualizado key=%s type=%s", row.key, row.type)
        return row

    def set_many(self, db: Session, updates: Mapping[str, Mapping[str, Any]]) -> None:
        if not updates:
            return
        now = utc_now()
        # se valida todo antes del commit: un valor malo no deja el lote a medias
        for k, item in updates.items():
            self._upsert(
                db,
                k,
                item.get("value"),
                item.get("type") or SettingType.STRING,
                item.get("description"),
                now,
            )
        db.commit()
        logger.info("Settings actualizados keys=%s", sorted(updates.keys()))

    def seed_defaults(self, db: Session) -> int:
        existing = {k for (k,) in db.query(Setting.key).all()}
        now = utc_now()
        created = 0
        for key, default in DEFAULT_SETTINGS.items():
            if key in existing:
                continue
            self._upsert(db, key, default["value"], default["type"], default["description"], now)
            created += 1
        if created:
            db.commit()
        return created


settings_service = SettingsService()

# statuspage/services/data_transfer.py
"""
Export / import / reset de todas las tablas del status page.

El documento de export usa las mismas claves camelCase que la API. El import
es best-effort: cada fila va en su propio SAVEPOINT y una fila que choca
(PK/unique/FK) se salta sin tumbar el resto.
"""
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy import DateTime, Enum as SAEnum, func, insert, text
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from statuspage.core.errors import PersistenceError, ValidationError
from statuspage.core.timeutils import ensure_utc, parse_iso, utc_now
from statuspage.db import Base
from statuspage.models import (
    Component,
    Incident,
    IncidentComponent,
    IncidentService,
    IncidentUpdate,
    MaintenanceComponent,
    MaintenanceService,
    MaintenanceUpdate,
    ScheduledMaintenance,
    Service,
    ServiceStatusHistory,
    Setting,
)

logger = logging.getLogger("statuspage.data_transfer")

EXPORT_VERSION = "1.0"

# orden de inserción: padres antes que hijos (reset usa el orden inverso)
TABLES: List[Tuple[str, Type[Base]]] = [
    ("settings", Setting),
    ("services", Service),
    ("components", Component),
    ("serviceStatusHistory", ServiceStatusHistory),
    ("incidents", Incident),
    ("incidentUpdates", IncidentUpdate),
    ("incidentServices", IncidentService),
    ("incidentComponents", IncidentComponent),
    ("maintenance", ScheduledMaintenance),
    ("maintenanceUpdates", MaintenanceUpdate),
    ("maintenanceServices", MaintenanceService),
    ("maintenanceComponents", MaintenanceComponent),
]


def _export_value(v: Any) -> Any:
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, datetime):
        return ensure_utc(v).isoformat()
    return v


def _row_to_dict(obj: Any) -> Dict[str, Any]:
    return {to_camel(c.key): _export_value(getattr(obj, c.key)) for c in obj.__table__.columns}


def export_data(db: Session) -> Dict[str, Any]:
    data: Dict[str, List[Dict[str, Any]]] = {}
    for name, model in TABLES:
        rows = db.query(model).order_by(model.id.asc()).all()
        data[name] = [_row_to_dict(r) for r in rows]

    logger.info("Export generado: %s", {k: len(v) for k, v in data.items()})
    return {
        "version": EXPORT_VERSION,
        "exportedAt": utc_now().isoformat(),
        "data": data,
    }


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or utc_now()
    return f"status-page-export-{now.date().isoformat()}.json"


def _coerce_row(model: Type[Base], raw: Mapping[str, Any]) -> Dict[str, Any]:
    """camelCase -> columnas del modelo, con fechas y enums ya convertidos."""
    cols = {c.key: c for c in model.__table__.columns}
    out: Dict[str, Any] = {}
    for k, v in raw.items():
        key = to_snake(str(k))
        col = cols.get(key)
        if col is None:
            continue
        if v is not None and isinstance(col.type, DateTime) and isinstance(v, str):
            v = parse_iso(v)
        elif v is not None and isinstance(col.type, SAEnum) and col.type.enum_class is not None:
            v = col.type.enum_class(v)
        out[key] = v
    return out


def _reset_sequences(db: Session) -> None:
    # los ids importados vienen explícitos; en Postgres hay que mover los serial
    if db.get_bind().dialect.name != "postgresql":
        return
    for _name, model in TABLES:
        table = model.__tablename__
        db.execute(
            text(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"COALESCE((SELECT MAX(id) FROM {table}), 1), "
                f"(SELECT MAX(id) FROM {table}) IS NOT NULL)"
            )
        )


def import_data(db: Session, document: Any) -> Dict[str, Dict[str, int]]:
    if not isinstance(document, dict) or not isinstance(document.get("data"), dict):
        raise ValidationError("Invalid import data format")

    data = document["data"]
    result: Dict[str, Dict[str, int]] = {}

    for name, model in TABLES:
        rows = data.get(name) or []
        counts = {"inserted": 0, "skipped": 0}
        if not isinstance(rows, list):
            logger.warning("Import: %s no es una lista, se ignora", name)
            result[name] = counts
            continue

        for raw in rows:
            if not isinstance(raw, dict):
                counts["skipped"] += 1
                continue
            try:
                values = _coerce_row(model, raw)
            except (TypeError, ValueError) as e:
                logger.info("Import: fila inválida en %s (%s), se salta", name, e)
                counts["skipped"] += 1
                continue

            sp = db.begin_nested()
            try:
                db.execute(insert(model.__table__).values(**values))
                sp.commit()
                counts["inserted"] += 1
            except (IntegrityError, DataError) as e:
                sp.rollback()
                logger.info("Import: fila en conflicto en %s id=%s, se salta (%s)", name, raw.get("id"), type(e).__name__)
                counts["skipped"] += 1

        result[name] = counts

    try:
        _reset_sequences(db)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Import: fallo al confirmar")
        raise PersistenceError("Failed to import data")
    logger.info("Import terminado: %s", result)
    return result


def reset_data(db: Session) -> Dict[str, int]:
    deleted: Dict[str, int] = {}
    try:
        for name, model in reversed(TABLES):
            deleted[name] = db.query(model).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        # todo o nada: no dejamos tablas a medio vaciar
        db.rollback()
        logger.exception("Reset: fallo borrando datos")
        raise PersistenceError("Failed to reset data")
    logger.warning("Reset de datos: %s", deleted)
    return deleted


def database_stats(db: Session) -> Dict[str, Any]:
    def _count(model: Type[Base]) -> int:
        return int(db.query(func.count(model.id)).scalar() or 0)

    db.execute(text("SELECT 1"))
    return {
        "status": "connected",
        "database": db.get_bind().dialect.name,
        "statistics": {
            "services": _count(Service),
            "components": _count(Component),
            "incidents": _count(Incident),
            "maintenance": _count(ScheduledMaintenance),
            "settings": _count(Setting),
        },
    }

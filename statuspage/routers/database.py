from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from statuspage.core.errors import ValidationError
from statuspage.db import get_db
from statuspage.models.user import User
from statuspage.routers.auth import require_database_admin
from statuspage.schemas.database import DatabaseActionIn
from statuspage.services import data_transfer

logger = logging.getLogger("statuspage.database")

router = APIRouter(prefix="/database", tags=["Database"])


@router.get("")
def database_status(db: Session = Depends(get_db)):
    try:
        return data_transfer.database_stats(db)
    except SQLAlchemyError:
        logger.exception("No se pudo consultar la base de datos")
        return JSONResponse(
            status_code=500,
            content={"status": "disconnected", "error": "Database connection failed"},
        )


@router.post("")
def database_action(
    payload: DatabaseActionIn,
    db: Session = Depends(get_db),
    _: User = Depends(require_database_admin),
):
    if payload.action == "export":
        doc = data_transfer.export_data(db)
        return JSONResponse(
            content=doc,
            headers={
                "Content-Disposition": f'attachment; filename="{data_transfer.export_filename()}"',
            },
        )

    if payload.action == "import":
        if payload.data is None:
            raise ValidationError("Invalid import data format")
        counts = data_transfer.import_data(db, payload.data)
        return {"success": True, "message": "Data imported successfully", "tables": counts}

    if payload.action == "reset":
        deleted = data_transfer.reset_data(db)
        return {"success": True, "message": "All data has been reset", "deleted": deleted}

    raise ValidationError("Invalid action")

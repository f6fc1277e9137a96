from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from statuspage.core.enums import Role
from statuspage.core.security import hash_password, normalize_email
from statuspage.models.user import User
from statuspage.services.settings_service import settings_service

logger = logging.getLogger("statuspage.bootstrap")


def seed_admin_user(
    db: Session,
    email: str,
    password: str,
    name: str = "Admin",
) -> None:
    # Si la tabla users no existe todavía (migraciones sin correr), NO truena el startup.
    insp = inspect(db.get_bind())
    if not insp.has_table("users"):
        return

    email = normalize_email(email)
    exists = db.query(User).filter(User.email == email).first()
    if exists:
        return

    u = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        role=Role.ADMIN.value,
    )
    db.add(u)
    db.commit()
    logger.info("Admin inicial creado: %s", email)


def seed_default_settings(db: Session) -> None:
    insp = inspect(db.get_bind())
    if not insp.has_table("settings"):
        return

    created = settings_service.seed_defaults(db)
    if created:
        logger.info("Settings por defecto sembrados: %s", created)

# scripts/create_admin.py
from __future__ import annotations

import getpass
import sys

from sqlalchemy.orm import Session

from statuspage.config import settings
from statuspage.core.enums import Role
from statuspage.core.security import hash_password, normalize_email
from statuspage.db import build_engine, build_session_factory
from statuspage.models.user import User


def main() -> int:
    if len(sys.argv) not in (2, 3):
        print("USO: python -m scripts.create_admin <email> [nombre]")
        return 2

    email = normalize_email(sys.argv[1])
    name = sys.argv[2].strip() if len(sys.argv) == 3 else "Admin"

    password = getpass.getpass("Password: ")
    if len(password) < 6:
        print("❌ La contraseña debe tener al menos 6 caracteres.")
        return 1

    engine = build_engine(settings.DATABASE_URL)
    db: Session = build_session_factory(engine)()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            # reset de contraseña + rol admin
            user.hashed_password = hash_password(password)
            user.role = Role.ADMIN.value
            action = "actualizado"
        else:
            user = User(email=email, name=name, hashed_password=hash_password(password), role=Role.ADMIN.value)
            db.add(user)
            action = "creado"
        db.commit()

        print(f"✅ Admin {action}: {email} (id={user.id}).")
        return 0

    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    raise SystemExit(main())

from sqlalchemy import Column, DateTime, Integer, String, func

from statuspage.core.enums import Role
from statuspage.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # string libre: los permisos salen de ROLE_CAPABILITIES, no de comparar el texto
    role = Column(String(50), nullable=False, default=Role.ADMIN.value, server_default=Role.ADMIN.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

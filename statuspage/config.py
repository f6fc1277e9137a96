# statuspage/config.py
from typing import List, Optional

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Backend / JWT / DB ---
    DATABASE_URL: str
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Registro de admins: hash hex de sha256(salt + código) que se reparte fuera de banda
    REFERRAL_CODE_HASH: Optional[str] = None
    REFERRAL_CODE_SALT: str = ""

    CORS_ORIGINS: List[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]

    LOG_LEVEL: str = "INFO"

    # --- Seed admin (opcional) ---
    INITIAL_ADMIN_EMAIL: Optional[EmailStr] = None
    INITIAL_ADMIN_PASSWORD: Optional[str] = None
    INITIAL_ADMIN_NAME: str = "Admin"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

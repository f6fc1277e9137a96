# statuspage/core/security.py
from __future__ import annotations

import hashlib
import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from statuspage.config import settings

# ------------------------------
# Passwords (usuarios)
# ------------------------------
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)

ALGORITHM = "HS256"

REFERRAL_CODE_MIN_LENGTH = 8
REFERRAL_CODE_MAX_LENGTH = 16


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# emails se guardan y buscan en minúsculas
def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


# ------------------------------
# JWT
# ------------------------------
def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    to_encode = data.copy()
    if expires_delta is not None:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


# -------------------------------------------------------------------
# Código de registro de admins
#
# En el entorno solo vive REFERRAL_CODE_HASH = sha256(salt + código) en hex.
# -------------------------------------------------------------------

def hash_referral_code(code: str, salt: Optional[str] = None) -> str:
    s = settings.REFERRAL_CODE_SALT if salt is None else salt
    return hashlib.sha256(f"{s}{code}".encode("utf-8")).hexdigest()


def verify_referral_code(code: str) -> bool:
    expected = (settings.REFERRAL_CODE_HASH or "").strip().lower()
    if not expected:
        return False
    code = code or ""
    if not (REFERRAL_CODE_MIN_LENGTH <= len(code) <= REFERRAL_CODE_MAX_LENGTH):
        return False
    return hmac.compare_digest(hash_referral_code(code), expected)

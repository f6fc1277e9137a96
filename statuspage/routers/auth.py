from datetime import timedelta
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from statuspage.config import settings
from statuspage.core.enums import Capability, Role, capabilities_for
from statuspage.core.errors import AuthError, ForbiddenError
from statuspage.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    normalize_email,
    verify_password,
    verify_referral_code,
)
from statuspage.db import get_db
from statuspage.models.user import User
from statuspage.schemas.user import Token, UserPublic, UserRegister

router = APIRouter(prefix="/auth", tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email=email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserRegister, db: Session = Depends(get_db)):
    """
    Registro de operadores:
    - email duplicado -> 400 (se revisa antes que el código)
    - requiere el código de registro (se compara su hash, nunca el texto)
    - el usuario creado es admin
    """
    existing = get_user_by_email(db, email=user_in.email)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A user with this email already exists",
        )

    if not verify_referral_code(user_in.referral_code):
        raise AuthError("Invalid referral code")

    db_user = User(
        email=normalize_email(user_in.email),
        name=user_in.name.strip(),
        hashed_password=hash_password(user_in.password),
        role=Role.ADMIN.value,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


@router.post("/login", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = authenticate_user(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": str(user.id)},
        expires_delta=expires,
    )

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": int(expires.total_seconds()),
    }


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    user_id = (payload or {}).get("sub")
    if user_id is None:
        raise credentials_exception

    try:
        uid = int(user_id)
    except (TypeError, ValueError):
        raise credentials_exception

    user = db.query(User).filter(User.id == uid).first()
    if user is None:
        raise credentials_exception
    return user


def require_capability(capability: Capability) -> Callable[..., User]:
    """Dependencia: 401 sin sesión válida, 403 si el rol no concede `capability`."""

    def _dep(current_user: User = Depends(get_current_user)) -> User:
        if capability not in capabilities_for(current_user.role):
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return _dep


require_status_writer = require_capability(Capability.MANAGE_STATUS)
require_settings_writer = require_capability(Capability.MANAGE_SETTINGS)
require_database_admin = require_capability(Capability.MANAGE_DATABASE)


@router.get("/me", response_model=UserPublic)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user

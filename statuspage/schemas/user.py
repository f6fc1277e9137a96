from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from statuspage.schemas.base import CamelModel


class UserRegister(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    referral_code: str


class UserPublic(CamelModel):
    id: int
    name: str
    email: EmailStr
    role: str


# formato OAuth2 estándar (snake_case): lo consumen clientes OAuth y /docs
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None

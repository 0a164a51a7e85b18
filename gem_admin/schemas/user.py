from pydantic import BaseModel, EmailStr, field_validator
from typing import Any, Optional


class LoginSchema(BaseModel):
    email: EmailStr
    password: str


class SessionUser(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    address: Optional[Any] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @field_validator("id", "email", "name", "phone", "role", "createdAt", "updatedAt", mode="before")
    @classmethod
    def _to_text(cls, v):
        # The store API does not fix these types; a phone may arrive as a number
        return v if v is None or isinstance(v, str) else str(v)


class DashboardSession(BaseModel):
    user: SessionUser
    accessToken: str
    jti: str


class LoginOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in_minutes: int
    user: SessionUser

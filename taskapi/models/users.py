# taskapi/models/users.py

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field


def _assume_utc(value: datetime) -> datetime:
    # The database hands back naive UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]


class RegisterIn(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[A-Za-z0-9]+$")
    email: EmailStr
    password: str = Field(..., min_length=5)
    role: Optional[Literal["user", "admin"]] = None


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: str
    username: str
    email: EmailStr
    is_admin: bool
    created_at: UtcDatetime

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: str
    username: str
    email: EmailStr


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    is_admin: bool


class MessageResponse(BaseModel):
    message: str

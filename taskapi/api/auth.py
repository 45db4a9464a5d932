# taskapi/api/auth.py

import logging
import uuid

from fastapi import APIRouter, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from taskapi.core.security import create_access_token, hash_password, verify_password
from taskapi.db.engine import get_engine
from taskapi.db.schema import users, utcnow
from taskapi.models.users import (
    LoginIn,
    MessageResponse,
    RegisterIn,
    TokenResponse,
    UserOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn) -> UserOut:
    """
    Create a user account. `role="admin"` creates an administrator.
    """
    email = _normalize_email(payload.email)
    engine = get_engine()

    record = {
        "id": str(uuid.uuid4()),
        "username": payload.username,
        "email": email,
        "password_hash": hash_password(payload.password),
        "is_admin": payload.role == "admin",
        "created_at": utcnow(),
    }

    with engine.begin() as conn:
        exists = conn.execute(
            select(users.c.id).where(users.c.email == email)
        ).first()
        if exists is not None:
            raise HTTPException(status_code=400, detail="User already exists")

        try:
            conn.execute(users.insert().values(**record))
        except IntegrityError:
            # lost a race with a concurrent registration
            raise HTTPException(status_code=400, detail="User already exists")

    logger.info("Registered user %s (admin=%s)", record["id"], record["is_admin"])
    return UserOut(**record)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginIn) -> TokenResponse:
    engine = get_engine()

    with engine.connect() as conn:
        row = conn.execute(
            select(users.c.id, users.c.password_hash, users.c.is_admin)
            .where(users.c.email == _normalize_email(payload.email))
        ).mappings().first()

    if row is None:
        raise HTTPException(status_code=400, detail="User not found")

    if not verify_password(payload.password, row["password_hash"]):
        logger.info("Failed login for user %s", row["id"])
        raise HTTPException(status_code=400, detail="Invalid credentials")

    token = create_access_token(row["id"], row["is_admin"])
    logger.info("User %s logged in", row["id"])

    return TokenResponse(token=token, is_admin=row["is_admin"])


@router.post("/logout", response_model=MessageResponse)
def logout() -> MessageResponse:
    # Tokens are stateless; the client discards its copy.
    return MessageResponse(message="Logged out successfully")

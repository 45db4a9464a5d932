# taskapi/api/deps.py

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select

from taskapi.core.security import TokenError, decode_access_token
from taskapi.db.engine import get_engine
from taskapi.db.schema import users

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _access_denied(reason: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"message": "Access denied.", "details": reason},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    Resolve the bearer token to the full user row.

    The user is re-read on every request so deleted users and role changes
    take effect before the token expires.
    """
    if credentials is None or not credentials.credentials:
        logger.info("Authentication error: no token provided")
        raise _access_denied("No token provided.")

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError as e:
        logger.info("Authentication error: %s", e)
        raise _access_denied(str(e))

    engine = get_engine()
    with engine.connect() as conn:
        row = conn.execute(
            select(users).where(users.c.id == claims["sub"])
        ).mappings().first()

    if row is None:
        logger.info("Authentication error: user %s not found", claims["sub"])
        raise _access_denied("User not found.")

    return dict(row)


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if not user["is_admin"]:
        raise HTTPException(status_code=403, detail="Access denied. Admins only.")
    return user


CurrentUser = Annotated[dict, Depends(get_current_user)]
AdminUser = Annotated[dict, Depends(require_admin)]

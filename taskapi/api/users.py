# taskapi/api/users.py

from typing import List

from fastapi import APIRouter
from sqlalchemy import select

from taskapi.api.deps import AdminUser
from taskapi.db.engine import get_engine
from taskapi.db.schema import users
from taskapi.models.users import UserSummary

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/", response_model=List[UserSummary])
def list_users(admin: AdminUser) -> List[UserSummary]:
    """
    Return every user (id, username, email). Admins only.
    """
    engine = get_engine()

    with engine.connect() as conn:
        stmt = (
            select(users.c.id, users.c.username, users.c.email)
            .order_by(users.c.username)
        )
        rows = conn.execute(stmt).mappings().all()

    return [
        UserSummary(id=row["id"], username=row["username"], email=row["email"])
        for row in rows
    ]

# scripts/create_admin.py
"""
Create an administrator account (or promote an existing user by e-mail).

Usage:
    python -m scripts.create_admin admin admin@example.com
"""

import argparse
import getpass
import logging
import uuid

from pydantic import ValidationError
from sqlalchemy import select

from taskapi.core.logging_config import setup_logging
from taskapi.core.security import hash_password
from taskapi.db.engine import get_engine
from taskapi.db.schema import metadata, users, utcnow
from taskapi.models.users import RegisterIn

logger = logging.getLogger(__name__)


def create_admin(username: str, email: str, password: str) -> str:
    """
    Insert an admin user, or flag an existing user with the same e-mail as
    admin. Returns the user id.
    """
    payload = RegisterIn(username=username, email=email, password=password, role="admin")
    email = payload.email.strip().lower()

    engine = get_engine()
    metadata.create_all(engine)

    with engine.begin() as conn:
        existing = conn.execute(
            select(users.c.id).where(users.c.email == email)
        ).first()

        if existing is not None:
            conn.execute(
                users.update().where(users.c.id == existing.id).values(is_admin=True)
            )
            logger.info("Promoted existing user %s to admin", existing.id)
            return existing.id

        user_id = str(uuid.uuid4())
        conn.execute(
            users.insert().values(
                id=user_id,
                username=payload.username,
                email=email,
                password_hash=hash_password(payload.password),
                is_admin=True,
                created_at=utcnow(),
            )
        )

    logger.info("Created admin user %s", user_id)
    return user_id


def main():
    setup_logging()

    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")

    try:
        user_id = create_admin(args.username, args.email, password)
    except ValidationError as e:
        parser.error(str(e))

    print(f"Admin user id: {user_id}")


if __name__ == "__main__":
    main()

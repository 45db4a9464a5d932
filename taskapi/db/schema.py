# taskapi/db/schema.py

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    MetaData, Table, Column, String, Boolean,
    DateTime, ForeignKey, CheckConstraint, Text, Index
)

metadata = MetaData()

TASK_STATUSES = ("To Do", "In Progress", "Completed")
TASK_PRIORITIES = ("Low", "Medium", "High")

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("username", String(30), nullable=False),
    Column("email", String, nullable=False, unique=True),
    Column("password_hash", String, nullable=False),
    Column("is_admin", Boolean, nullable=False, default=False),
    Column("created_at", DateTime, nullable=False),
)

tasks = Table(
    "tasks",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("due_date", DateTime),
    Column("status", String(20), nullable=False, default="To Do"),
    Column("priority", String(10), nullable=False, default="Medium"),
    Column(
        "assigned_user_id",
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "creator_id",
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    CheckConstraint(
        "status IN ('To Do', 'In Progress', 'Completed')",
        name="ck_tasks_status",
    ),
    CheckConstraint(
        "priority IN ('Low', 'Medium', 'High')",
        name="ck_tasks_priority",
    ),
)

Index("ix_tasks_assigned_user_id", tasks.c.assigned_user_id)
Index("ix_tasks_creator_id", tasks.c.creator_id)
Index("ix_tasks_created_at", tasks.c.created_at)


def utcnow() -> datetime:
    # Timestamps are stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

# taskapi/api/tasks.py

import csv
import io
import logging
import math
import uuid
from datetime import date, datetime, time, timedelta
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy import and_, func, or_, select

from taskapi.api.deps import CurrentUser
from taskapi.db.engine import get_engine
from taskapi.db.schema import as_naive_utc, tasks, users, utcnow
from taskapi.models.tasks import (
    PublicTaskListResponse,
    PublicTaskOut,
    TaskCreate,
    TaskListResponse,
    TaskOut,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from taskapi.models.users import MessageResponse, UserSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

PUBLIC_PAGE_SIZE = 10
# Keeps OFFSET within a 64-bit integer
MAX_PAGE = 1_000_000
REPORT_CSV_FIELDS = ["title", "description", "due_date", "status", "priority", "assigned_user"]

assignee = users.alias("assignee")


def _task_select():
    """Task columns plus the assigned user's username/email."""
    return (
        select(
            tasks,
            assignee.c.username.label("assigned_username"),
            assignee.c.email.label("assigned_email"),
        )
        .select_from(
            tasks.outerjoin(assignee, tasks.c.assigned_user_id == assignee.c.id)
        )
    )


def _row_to_task(row) -> TaskOut:
    assigned_user = None
    if row["assigned_user_id"] is not None and row["assigned_username"] is not None:
        assigned_user = UserSummary(
            id=row["assigned_user_id"],
            username=row["assigned_username"],
            email=row["assigned_email"],
        )

    return TaskOut(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        due_date=row["due_date"],
        status=row["status"],
        priority=row["priority"],
        assigned_user=assigned_user,
        creator_id=row["creator_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _visible_to(user: dict):
    """
    WHERE clause limiting a regular user to tasks assigned to or created by
    them. Admins see everything (None).
    """
    if user["is_admin"]:
        return None
    return or_(
        tasks.c.assigned_user_id == user["id"],
        tasks.c.creator_id == user["id"],
    )


def _ensure_user_exists(conn, user_id: str) -> None:
    found = conn.execute(select(users.c.id).where(users.c.id == user_id)).first()
    if found is None:
        raise HTTPException(status_code=400, detail="Assigned user not found")


def _fetch_task(conn, task_id: str, user: dict):
    conditions = [tasks.c.id == task_id]
    visibility = _visible_to(user)
    if visibility is not None:
        conditions.append(visibility)

    return conn.execute(_task_select().where(and_(*conditions))).mappings().first()


@router.post("/", response_model=TaskOut, status_code=201)
@router.post("/create", response_model=TaskOut, status_code=201)
def create_task(payload: TaskCreate, user: CurrentUser) -> TaskOut:
    """
    Create a task. Admins may assign it to any user; everyone else gets the
    task assigned to themselves.
    """
    assigned_user_id = user["id"]
    if payload.assigned_user is not None and user["is_admin"]:
        assigned_user_id = str(payload.assigned_user)

    now = utcnow()
    record = {
        "id": str(uuid.uuid4()),
        "title": payload.title,
        "description": payload.description,
        "due_date": as_naive_utc(payload.due_date),
        "status": payload.status,
        "priority": payload.priority,
        "assigned_user_id": assigned_user_id,
        "creator_id": user["id"],
        "created_at": now,
        "updated_at": now,
    }

    engine = get_engine()
    with engine.begin() as conn:
        if assigned_user_id != user["id"]:
            _ensure_user_exists(conn, assigned_user_id)
        conn.execute(tasks.insert().values(**record))
        row = conn.execute(
            _task_select().where(tasks.c.id == record["id"])
        ).mappings().one()

    logger.info(
        "User %s created task %s assigned to %s",
        user["id"], record["id"], assigned_user_id,
    )
    return _row_to_task(row)


@router.get("/", response_model=TaskListResponse)
def list_tasks(
    user: CurrentUser,
    status: Optional[TaskStatus] = Query(default=None),
    priority: Optional[TaskPriority] = Query(default=None),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=100),
) -> TaskListResponse:
    """
    Tasks for the logged-in user (all tasks for admins), newest first.
    """
    conditions = []
    if status is not None:
        conditions.append(tasks.c.status == status)
    if priority is not None:
        conditions.append(tasks.c.priority == priority)
    visibility = _visible_to(user)
    if visibility is not None:
        conditions.append(visibility)

    where = and_(True, *conditions)

    engine = get_engine()
    with engine.connect() as conn:
        total = conn.execute(
            select(func.count()).select_from(tasks).where(where)
        ).scalar_one()

        stmt = (
            _task_select()
            .where(where)
            .order_by(tasks.c.created_at.desc(), tasks.c.id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = conn.execute(stmt).mappings().all()

    return TaskListResponse(
        tasks=[_row_to_task(row) for row in rows],
        total=total,
        total_pages=math.ceil(total / limit),
        current_page=page,
        limit=limit,
    )


@router.get("/tasks", response_model=PublicTaskListResponse)
def list_public_tasks(page: int = Query(1)) -> PublicTaskListResponse:
    """
    Unauthenticated listing of all tasks, ten per page, newest first.
    Assignees are exposed by id only.
    """
    if page < 1 or page > MAX_PAGE:
        raise HTTPException(status_code=400, detail="Invalid page number")

    engine = get_engine()
    with engine.connect() as conn:
        total = conn.execute(select(func.count()).select_from(tasks)).scalar_one()

        stmt = (
            select(tasks)
            .order_by(tasks.c.created_at.desc(), tasks.c.id)
            .limit(PUBLIC_PAGE_SIZE)
            .offset((page - 1) * PUBLIC_PAGE_SIZE)
        )
        rows = conn.execute(stmt).mappings().all()

    return PublicTaskListResponse(
        tasks=[PublicTaskOut(**row) for row in rows],
        total_pages=math.ceil(total / PUBLIC_PAGE_SIZE),
    )


def _format_csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _tasks_to_csv(items: List[TaskOut]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(REPORT_CSV_FIELDS)
    for task in items:
        writer.writerow(
            [
                _format_csv_value(task.title),
                _format_csv_value(task.description),
                _format_csv_value(task.due_date),
                _format_csv_value(task.status),
                _format_csv_value(task.priority),
                _format_csv_value(task.assigned_user.username if task.assigned_user else None),
            ]
        )
    return buf.getvalue()


@router.get("/report", response_model=List[TaskOut])
def task_report(
    user: CurrentUser,
    status: Optional[TaskStatus] = Query(default=None),
    priority: Optional[TaskPriority] = Query(default=None),
    assigned_user: Optional[uuid.UUID] = Query(default=None),
    start_date: Optional[date] = Query(
        default=None, description="Earliest due date (inclusive), YYYY-MM-DD"
    ),
    end_date: Optional[date] = Query(
        default=None, description="Latest due date (inclusive), YYYY-MM-DD"
    ),
    report_format: Literal["json", "csv"] = Query(default="json", alias="format"),
):
    """
    Task summary report as JSON or as a CSV attachment.
    """
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    conditions = []
    if status is not None:
        conditions.append(tasks.c.status == status)
    if priority is not None:
        conditions.append(tasks.c.priority == priority)
    if assigned_user is not None:
        conditions.append(tasks.c.assigned_user_id == str(assigned_user))
    if start_date is not None:
        conditions.append(tasks.c.due_date >= datetime.combine(start_date, time.min))
    if end_date is not None:
        conditions.append(
            tasks.c.due_date < datetime.combine(end_date + timedelta(days=1), time.min)
        )
    visibility = _visible_to(user)
    if visibility is not None:
        conditions.append(visibility)

    engine = get_engine()
    with engine.connect() as conn:
        stmt = (
            _task_select()
            .where(and_(True, *conditions))
            .order_by(tasks.c.due_date.asc().nulls_last(), tasks.c.created_at.asc())
        )
        rows = conn.execute(stmt).mappings().all()

    items = [_row_to_task(row) for row in rows]
    logger.info("User %s generated %s report with %d tasks", user["id"], report_format, len(items))

    if report_format == "csv":
        return Response(
            content=_tasks_to_csv(items),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="task-report.csv"'},
        )

    return items


@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: str, user: CurrentUser) -> TaskOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = _fetch_task(conn, task_id, user)

    if row is None:
        raise HTTPException(status_code=404, detail="Task not found")

    return _row_to_task(row)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(task_id: str, payload: TaskUpdate, user: CurrentUser) -> TaskOut:
    """
    Partially update a task. Only admins can reassign it.
    """
    values = payload.model_dump(exclude_unset=True)
    requested_assignee = values.pop("assigned_user", None)
    if "due_date" in values:
        values["due_date"] = as_naive_utc(values["due_date"])

    engine = get_engine()
    with engine.begin() as conn:
        if _fetch_task(conn, task_id, user) is None:
            raise HTTPException(status_code=404, detail="Task not found")

        if "assigned_user" in payload.model_fields_set and user["is_admin"]:
            if requested_assignee is None:
                values["assigned_user_id"] = None
            else:
                values["assigned_user_id"] = str(requested_assignee)
                _ensure_user_exists(conn, values["assigned_user_id"])

        values["updated_at"] = utcnow()
        conn.execute(tasks.update().where(tasks.c.id == task_id).values(**values))

        row = conn.execute(_task_select().where(tasks.c.id == task_id)).mappings().one()

    logger.info("User %s updated task %s (%s)", user["id"], task_id, ", ".join(sorted(values)))
    return _row_to_task(row)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: str, user: CurrentUser) -> MessageResponse:
    engine = get_engine()
    with engine.begin() as conn:
        if _fetch_task(conn, task_id, user) is None:
            raise HTTPException(status_code=404, detail="Task not found")
        conn.execute(tasks.delete().where(tasks.c.id == task_id))

    logger.info("User %s deleted task %s", user["id"], task_id)
    return MessageResponse(message="Task deleted successfully")

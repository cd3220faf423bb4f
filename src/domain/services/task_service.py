"""Owner-scoped CRUD over company visit tasks."""

from __future__ import annotations

import calendar
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain import Session
from src.domain.errors import NotFoundError, ValidationError
from src.infrastructure.db.models import TaskModel

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()

DateInput = date | datetime | str

UPDATABLE_FIELDS = ("date", "company_name", "description", "is_completed")


def parse_task_date(value: DateInput | None) -> date:
    """Normalize an ISO date/datetime string, date or datetime to a calendar date."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("All fields are required")

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            # Accept a trailing "Z" as sent by browsers' Date.toISOString()
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise ValidationError(
                "Invalid date; use an ISO 8601 date such as '2024-03-15'"
            ) from exc

    raise ValidationError("Invalid date")


def _required_text(value: str | None) -> str:
    if value is None or not value.strip():
        raise ValidationError("All fields are required")
    return value.strip()


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """Return the first and last calendar day of a month."""
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not 1 <= year <= 9999:
        raise ValidationError("Invalid year")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class TaskService:
    """Task operations for the signed-in user; every query is filtered by owner."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        owner: Session,
        *,
        date: DateInput | None,
        company_name: str | None,
        description: str | None,
        is_completed: bool | None = False,
    ) -> TaskModel:
        """Raises ``ValidationError`` when a required field is missing or blank."""
        task = TaskModel(
            user_id=owner.user_id,
            date=parse_task_date(date),
            company_name=_required_text(company_name),
            description=_required_text(description),
            is_completed=bool(is_completed),
        )
        self.session.add(task)
        await self.session.commit()
        await self.session.refresh(task)

        await logger.ainfo("task_created", task_id=task.id, user_id=owner.user_id)
        return task

    async def list(
        self,
        owner: Session,
        *,
        month: int | None = None,
        year: int | None = None,
    ) -> list[TaskModel]:
        """Return the owner's tasks by date ascending, optionally limited to one month.

        The month filter applies only when both ``month`` and ``year`` are given.
        """
        stmt: Select[tuple[TaskModel]] = select(TaskModel).where(
            TaskModel.user_id == owner.user_id
        )
        if month is not None and year is not None:
            first_day, last_day = month_bounds(month, year)
            stmt = stmt.where(TaskModel.date >= first_day, TaskModel.date <= last_day)

        stmt = stmt.order_by(TaskModel.date.asc(), TaskModel.created_at.asc())
        return list((await self.session.execute(stmt)).scalars().all())

    async def get(self, owner: Session, task_id: str) -> TaskModel:
        """Raises ``NotFoundError`` unless the task exists and belongs to ``owner``."""
        stmt: Select[tuple[TaskModel]] = select(TaskModel).where(
            TaskModel.id == task_id,
            TaskModel.user_id == owner.user_id,
        )
        task = await self.session.scalar(stmt)
        if task is None:
            await logger.ainfo("task_not_found", task_id=task_id, user_id=owner.user_id)
            raise NotFoundError("Task not found")
        return task

    async def update(
        self, owner: Session, task_id: str, changes: Mapping[str, Any]
    ) -> TaskModel:
        """Apply the supplied fields; ``None`` values and unknown keys are ignored.

        Raises:
            NotFoundError: no such task among the owner's tasks.
            ValidationError: a supplied field is blank or malformed.
        """
        supplied = {
            key: value
            for key, value in changes.items()
            if key in UPDATABLE_FIELDS and value is not None
        }
        # Validate before touching the row so a bad payload leaves it intact
        if "date" in supplied:
            supplied["date"] = parse_task_date(supplied["date"])
        for key in ("company_name", "description"):
            if key in supplied:
                supplied[key] = _required_text(supplied[key])
        if "is_completed" in supplied:
            supplied["is_completed"] = bool(supplied["is_completed"])

        task = await self.get(owner, task_id)
        for key, value in supplied.items():
            setattr(task, key, value)

        await self.session.commit()
        await self.session.refresh(task)

        await logger.ainfo(
            "task_updated",
            task_id=task.id,
            user_id=owner.user_id,
            updated_fields=sorted(supplied),
        )
        return task

    async def delete(self, owner: Session, task_id: str) -> None:
        """Remove the task permanently; raises ``NotFoundError`` like :meth:`update`."""
        task = await self.get(owner, task_id)
        await self.session.delete(task)
        await self.session.commit()

        await logger.ainfo("task_deleted", task_id=task_id, user_id=owner.user_id)

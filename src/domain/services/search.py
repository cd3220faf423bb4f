from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain import Session
from src.infrastructure.db.models import TaskModel

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()


class SearchService:
    """Type-ahead lookup of a user's tasks by company name."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        min_length: int | None = None,
        limit: int | None = None,
    ) -> None:
        settings = get_settings()
        self.session = session
        self.min_length = min_length if min_length is not None else settings.search_min_length
        self.limit = limit if limit is not None else settings.search_limit

    async def search(self, owner: Session, query: str | None) -> list[TaskModel]:
        """Case-insensitive substring match on company name, newest first.

        Queries shorter than ``min_length`` return nothing without hitting the
        database; wildcard characters in the query are matched literally.
        """
        if not query or len(query) < self.min_length:
            return []

        stmt: Select[tuple[TaskModel]] = (
            select(TaskModel)
            .where(
                TaskModel.user_id == owner.user_id,
                TaskModel.company_name.icontains(query, autoescape=True),
            )
            .order_by(TaskModel.date.desc(), TaskModel.created_at.desc())
            .limit(self.limit)
        )
        tasks = list((await self.session.execute(stmt)).scalars().all())

        await logger.adebug(
            "task_search", user_id=owner.user_id, query_length=len(query), results=len(tasks)
        )
        return tasks

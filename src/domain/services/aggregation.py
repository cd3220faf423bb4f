from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain import CompanyStat, Session
from src.infrastructure.db.models import TaskModel

if TYPE_CHECKING:
    from sqlalchemy import Select


class AggregationService:
    """Per-company statistics over one user's tasks."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def company_summary(self, owner: Session) -> list[CompanyStat]:
        """Group the owner's tasks by exact company name.

        Names are grouped as stored, so "Acme" and "acme" are separate companies.
        """
        stmt = (
            select(
                TaskModel.company_name,
                func.count(TaskModel.id),
                func.max(TaskModel.date),
            )
            .where(TaskModel.user_id == owner.user_id)
            .group_by(TaskModel.company_name)
        )
        rows = (await self.session.execute(stmt)).all()

        stats = [
            CompanyStat(company_name=name, visit_count=count, last_visit=last_visit)
            for name, count, last_visit in rows
        ]
        # Code point order; database collations may fold case or accents
        stats.sort(key=lambda stat: stat.company_name)
        return stats

    async def company_visits(self, owner: Session, company_name: str) -> list[TaskModel]:
        """Return the owner's tasks for exactly ``company_name``, newest first."""
        stmt: Select[tuple[TaskModel]] = (
            select(TaskModel)
            .where(
                TaskModel.user_id == owner.user_id,
                TaskModel.company_name == company_name,
            )
            .order_by(TaskModel.date.desc(), TaskModel.created_at.desc())
        )
        return list((await self.session.execute(stmt)).scalars().all())

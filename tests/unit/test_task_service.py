"""Unit tests for owner-scoped task CRUD."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain import Session
from src.domain.errors import NotFoundError, ValidationError
from src.domain.services.task_service import TaskService, month_bounds, parse_task_date


class TestParseTaskDate:
    def test_plain_iso_date(self) -> None:
        assert parse_task_date("2024-03-15") == date(2024, 3, 15)

    @pytest.mark.parametrize(
        "value",
        ["2024-03-15T09:30:00", "2024-03-15T09:30:00Z", "2024-03-15T09:30:00.000+00:00"],
    )
    def test_datetime_strings_keep_calendar_day(self, value: str) -> None:
        assert parse_task_date(value) == date(2024, 3, 15)

    def test_date_and_datetime_objects(self) -> None:
        assert parse_task_date(date(2024, 1, 2)) == date(2024, 1, 2)
        assert parse_task_date(datetime(2024, 1, 2, 23, 59)) == date(2024, 1, 2)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_value_is_required_error(self, value: str | None) -> None:
        with pytest.raises(ValidationError, match="All fields are required"):
            parse_task_date(value)

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-01", "15/03/2024"])
    def test_garbage_is_rejected(self, value: str) -> None:
        with pytest.raises(ValidationError, match="Invalid date"):
            parse_task_date(value)


class TestMonthBounds:
    def test_leap_february(self) -> None:
        assert month_bounds(2, 2024) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_december(self) -> None:
        assert month_bounds(12, 2023) == (date(2023, 12, 1), date(2023, 12, 31))

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month: int) -> None:
        with pytest.raises(ValidationError):
            month_bounds(month, 2024)


class TestTaskService:
    async def test_create_trims_text_and_defaults_to_pending(
        self, db: AsyncSession, owner: Session
    ) -> None:
        task = await TaskService(db).create(
            owner,
            date="2024-03-15",
            company_name="  Acme  ",
            description=" Replace filters ",
        )

        assert task.id
        assert task.user_id == owner.user_id
        assert task.date == date(2024, 3, 15)
        assert task.company_name == "Acme"
        assert task.description == "Replace filters"
        assert task.is_completed is False
        assert task.status == "pending"
        assert task.created_at is not None

    @pytest.mark.parametrize(
        ("field", "value"),
        [("date", None), ("company_name", "   "), ("description", "")],
    )
    async def test_create_requires_every_field(
        self, db: AsyncSession, owner: Session, field: str, value: str | None
    ) -> None:
        fields = {"date": "2024-03-15", "company_name": "Acme", "description": "Visit"}
        fields[field] = value

        with pytest.raises(ValidationError, match="All fields are required"):
            await TaskService(db).create(owner, **fields)

        assert await TaskService(db).list(owner) == []

    async def test_list_is_ordered_by_date(self, db: AsyncSession, owner: Session) -> None:
        service = TaskService(db)
        for day in ("2024-03-20", "2024-01-05", "2024-03-01"):
            await service.create(owner, date=day, company_name="Acme", description="Visit")

        tasks = await service.list(owner)

        assert [t.date.isoformat() for t in tasks] == ["2024-01-05", "2024-03-01", "2024-03-20"]

    async def test_month_filter_is_inclusive(self, db: AsyncSession, owner: Session) -> None:
        service = TaskService(db)
        for day in ("2024-02-29", "2024-03-01", "2024-03-31", "2024-04-01"):
            await service.create(owner, date=day, company_name="Acme", description="Visit")

        march = await service.list(owner, month=3, year=2024)
        april = await service.list(owner, month=4, year=2024)

        assert [t.date.isoformat() for t in march] == ["2024-03-01", "2024-03-31"]
        assert [t.date.isoformat() for t in april] == ["2024-04-01"]
        assert await service.list(owner, month=3, year=2023) == []

    async def test_month_without_year_is_ignored(self, db: AsyncSession, owner: Session) -> None:
        service = TaskService(db)
        await service.create(owner, date="2024-03-01", company_name="Acme", description="Visit")
        await service.create(owner, date="2024-05-01", company_name="Acme", description="Visit")

        assert len(await service.list(owner, month=3)) == 2

    async def test_list_only_returns_own_tasks(
        self, db: AsyncSession, owner: Session, stranger: Session
    ) -> None:
        service = TaskService(db)
        await service.create(owner, date="2024-03-01", company_name="Acme", description="Mine")
        await service.create(stranger, date="2024-03-01", company_name="Acme", description="Not")

        tasks = await service.list(owner)

        assert [t.description for t in tasks] == ["Mine"]

    async def test_update_changes_only_supplied_fields(
        self, db: AsyncSession, owner: Session
    ) -> None:
        service = TaskService(db)
        task = await service.create(
            owner, date="2024-03-15", company_name="Acme", description="Visit"
        )

        updated = await service.update(
            owner, task.id, {"is_completed": True, "description": None, "user_id": "hijack"}
        )

        assert updated.is_completed is True
        assert updated.status == "completed"
        assert updated.description == "Visit"
        assert updated.user_id == owner.user_id

    async def test_update_is_idempotent(self, db: AsyncSession, owner: Session) -> None:
        service = TaskService(db)
        task = await service.create(
            owner, date="2024-03-15", company_name="Acme", description="Visit"
        )
        changes = {"company_name": "Globex", "date": "2024-04-01"}

        first = await service.update(owner, task.id, changes)
        first_state = (first.company_name, first.date, first.description, first.is_completed)
        second = await service.update(owner, task.id, changes)

        assert (second.company_name, second.date, second.description, second.is_completed) == (
            first_state
        )
        assert second.date == date(2024, 4, 1)

    async def test_update_rejects_blank_text_and_keeps_row(
        self, db: AsyncSession, owner: Session
    ) -> None:
        service = TaskService(db)
        task = await service.create(
            owner, date="2024-03-15", company_name="Acme", description="Visit"
        )

        with pytest.raises(ValidationError):
            await service.update(owner, task.id, {"company_name": "  "})

        assert (await service.get(owner, task.id)).company_name == "Acme"

    async def test_foreign_task_is_not_found(
        self, db: AsyncSession, owner: Session, stranger: Session
    ) -> None:
        service = TaskService(db)
        task = await service.create(
            stranger, date="2024-03-15", company_name="Acme", description="Visit"
        )

        with pytest.raises(NotFoundError):
            await service.update(owner, task.id, {"is_completed": True})
        with pytest.raises(NotFoundError):
            await service.delete(owner, task.id)

        still_there = await service.get(stranger, task.id)
        assert still_there.is_completed is False

    async def test_delete_removes_task(self, db: AsyncSession, owner: Session) -> None:
        service = TaskService(db)
        task = await service.create(
            owner, date="2024-03-15", company_name="Acme", description="Visit"
        )

        await service.delete(owner, task.id)

        assert await service.list(owner) == []
        with pytest.raises(NotFoundError):
            await service.delete(owner, task.id)

    async def test_unknown_id_is_not_found(self, db: AsyncSession, owner: Session) -> None:
        with pytest.raises(NotFoundError, match="Task not found"):
            await TaskService(db).get(owner, "does-not-exist")

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    # Stored lowercased; uniqueness is therefore case-insensitive
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    tasks: Mapped[list[TaskModel]] = relationship(back_populates="owner")

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email})>"


class TaskModel(Base):
    """A dated company visit owned by exactly one user."""

    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_user_id_date", "user_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    owner: Mapped[UserModel] = relationship(back_populates="tasks")

    @property
    def status(self) -> str:
        return "completed" if self.is_completed else "pending"

    def __repr__(self) -> str:
        return f"<TaskModel(id={self.id}, company_name={self.company_name}, date={self.date})>"


__all__ = [
    "UserModel",
    "TaskModel",
]

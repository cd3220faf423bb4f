from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import Field

from .base import CamelModel


class TaskCreate(CamelModel):
    # Strings rather than dates so that blank values reach the service's
    # "All fields are required" check instead of a parse error
    date: str | None = Field(None, description="Visit date, ISO 8601 (YYYY-MM-DD)")
    company_name: str | None = Field(None, max_length=255)
    description: str | None = None
    is_completed: bool | None = False


class TaskUpdate(CamelModel):
    date: str | None = None
    company_name: str | None = Field(None, max_length=255)
    description: str | None = None
    is_completed: bool | None = None


class TaskItem(CamelModel):
    id: str
    user_id: str
    date: dt.date
    company_name: str
    description: str
    is_completed: bool
    status: Literal["pending", "completed"]
    created_at: dt.datetime
    updated_at: dt.datetime


class TaskListResponse(CamelModel):
    tasks: list[TaskItem]


class TaskResponse(CamelModel):
    task: TaskItem
    message: str

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_session, get_db_session
from src.api.schemas.base import MessageResponse
from src.api.schemas.tasks import (
    TaskCreate,
    TaskItem,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from src.domain import Session
from src.domain.services import SearchService, TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("", response_model=TaskListResponse, summary="List tasks")
async def list_tasks(
    month: int | None = Query(None, description="Month 1-12; needs year"),
    year: int | None = Query(None, description="Four digit year; needs month"),
    owner: Session = Depends(get_current_session),
    session: AsyncSession = Depends(get_db_session),
) -> TaskListResponse:
    """Return the caller's tasks by date, optionally for one calendar month."""
    tasks = await TaskService(session).list(owner, month=month, year=year)
    return TaskListResponse(tasks=[TaskItem.model_validate(task) for task in tasks])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    responses={400: {"description": "Missing date, company name or description"}},
)
async def create_task(
    payload: TaskCreate,
    owner: Session = Depends(get_current_session),
    session: AsyncSession = Depends(get_db_session),
) -> TaskResponse:
    task = await TaskService(session).create(
        owner,
        date=payload.date,
        company_name=payload.company_name,
        description=payload.description,
        is_completed=payload.is_completed,
    )
    return TaskResponse(task=TaskItem.model_validate(task), message="Task created")


# Declared before "/{task_id}" routes so "search" is not read as an id
@router.get("/search", response_model=TaskListResponse, summary="Search tasks by company")
async def search_tasks(
    q: str = Query("", description="Part of a company name; at least 2 characters"),
    owner: Session = Depends(get_current_session),
    session: AsyncSession = Depends(get_db_session),
) -> TaskListResponse:
    tasks = await SearchService(session).search(owner, q)
    return TaskListResponse(tasks=[TaskItem.model_validate(task) for task in tasks])


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update task",
    description="Change any of date, companyName, description and isCompleted.",
    responses={404: {"description": "Task not found"}},
)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    owner: Session = Depends(get_current_session),
    session: AsyncSession = Depends(get_db_session),
) -> TaskResponse:
    task = await TaskService(session).update(
        owner, task_id, payload.model_dump(exclude_unset=True)
    )
    return TaskResponse(task=TaskItem.model_validate(task), message="Task updated")


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete task",
    responses={404: {"description": "Task not found"}},
)
async def delete_task(
    task_id: str,
    owner: Session = Depends(get_current_session),
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await TaskService(session).delete(owner, task_id)
    return MessageResponse(message="Task deleted")

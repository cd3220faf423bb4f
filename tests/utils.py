from __future__ import annotations

from typing import Any

from httpx import AsyncClient
from src.core.auth import get_session_tokens
from src.domain import Session


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def auth_headers_for(session: Session) -> dict[str, str]:
    """Sign a token directly, without going through login."""
    return bearer(get_session_tokens().issue(session))


async def register_user(client: AsyncClient, payload: dict[str, str]) -> dict[str, str]:
    """Register and log in, returning bearer headers.

    The login cookie is dropped so that later requests on the shared client
    authenticate only through the headers they pass explicitly.
    """
    response = await client.post("/auth/register", json=payload)
    assert response.status_code == 201, response.text

    response = await client.post(
        "/auth/login",
        json={"email": payload["email"], "password": payload["password"]},
    )
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return bearer(response.json()["accessToken"])


def task_payload(
    date: str = "2024-03-15",
    company_name: str = "Acme",
    description: str = "Quarterly maintenance visit",
    **extra: Any,
) -> dict[str, Any]:
    return {
        "date": date,
        "companyName": company_name,
        "description": description,
        **extra,
    }


async def create_task(
    client: AsyncClient, headers: dict[str, str], **fields: Any
) -> dict[str, Any]:
    response = await client.post("/tasks", json=task_payload(**fields), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["task"]

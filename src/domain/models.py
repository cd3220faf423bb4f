from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(slots=True, frozen=True)
class User:
    """A registered account as exposed outside the credential store."""

    id: str
    first_name: str
    last_name: str
    email: str

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(slots=True, frozen=True)
class Session:
    """Authenticated identity recovered from a valid session token."""

    user_id: str
    name: str
    email: str


@dataclass(slots=True, frozen=True)
class CompanyStat:
    """Visit statistics for one company among a user's tasks."""

    company_name: str
    visit_count: int
    last_visit: date

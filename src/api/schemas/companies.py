from __future__ import annotations

from datetime import date

from .base import CamelModel
from .tasks import TaskItem


class CompanyItem(CamelModel):
    company_name: str
    visit_count: int
    last_visit: date


class CompaniesResponse(CamelModel):
    companies: list[CompanyItem]
    total_companies: int


class CompanyVisitsResponse(CamelModel):
    company_name: str
    visits: list[TaskItem]
    total_visits: int

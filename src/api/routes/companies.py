from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_session, get_db_session
from src.api.schemas.companies import CompaniesResponse, CompanyItem, CompanyVisitsResponse
from src.api.schemas.tasks import TaskItem
from src.domain import Session
from src.domain.services import AggregationService

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.get("", response_model=CompaniesResponse, summary="Visited companies")
async def list_companies(
    owner: Session = Depends(get_current_session),
    session: AsyncSession = Depends(get_db_session),
) -> CompaniesResponse:
    """Every company the caller has visited with visit count and last visit date."""
    stats = await AggregationService(session).company_summary(owner)
    companies = [CompanyItem.model_validate(stat) for stat in stats]
    return CompaniesResponse(companies=companies, total_companies=len(companies))


@router.get(
    "/{company_name:path}",
    response_model=CompanyVisitsResponse,
    summary="Visits to one company",
)
async def company_visits(
    company_name: str,
    owner: Session = Depends(get_current_session),
    session: AsyncSession = Depends(get_db_session),
) -> CompanyVisitsResponse:
    """Exact-name match, newest first. The path segment arrives percent-decoded."""
    visits = await AggregationService(session).company_visits(owner, company_name)
    return CompanyVisitsResponse(
        company_name=company_name,
        visits=[TaskItem.model_validate(task) for task in visits],
        total_visits=len(visits),
    )

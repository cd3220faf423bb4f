"""Domain services."""

from src.domain.services.aggregation import AggregationService
from src.domain.services.auth_service import AuthService
from src.domain.services.search import SearchService
from src.domain.services.task_service import TaskService

__all__ = [
    "AggregationService",
    "AuthService",
    "SearchService",
    "TaskService",
]

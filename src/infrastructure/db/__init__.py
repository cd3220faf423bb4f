from . import models  # noqa: F401
from .base import Base
from .models import TaskModel, UserModel
from .session import (
    build_engine,
    build_session_factory,
    dispose_engine,
    get_session,
    get_session_factory,
    migration_database_url,
)

__all__ = [
    "Base",
    "TaskModel",
    "UserModel",
    "build_engine",
    "build_session_factory",
    "dispose_engine",
    "get_session",
    "get_session_factory",
    "migration_database_url",
]

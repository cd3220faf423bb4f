from src.domain.models import CompanyStat, Session, User

__all__ = ["CompanyStat", "Session", "User"]

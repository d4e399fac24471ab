from .models import Base, ReviewLog
from .reviews import list_recent_reviews, record_review
from .session import SessionLocal, engine

__all__ = ["Base", "ReviewLog", "SessionLocal", "engine", "list_recent_reviews", "record_review"]

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from brand_review.db.models import ReviewLog
from brand_review.db.session import SessionLocal

logger = logging.getLogger(__name__)


def record_review(
    mode: str,
    query_chars: int,
    response: Optional[str],
    agent_id: Optional[str] = None,
    brand_id: Optional[str] = None,
    compliance_score: Optional[int] = None,
    status: Optional[str] = None,
    parse_mode: Optional[str] = None,
) -> Optional[int]:
    """
    Persist one agent call. Returns the row id, or None when the database
    is unavailable; a failed write never fails the request.
    """
    try:
        with SessionLocal() as session:
            log = ReviewLog(
                agent_id=agent_id,
                brand_id=brand_id,
                mode=mode,
                query_chars=query_chars,
                response=response,
                compliance_score=compliance_score,
                status=status,
                parse_mode=parse_mode,
            )
            session.add(log)
            session.commit()
            return log.id
    except SQLAlchemyError as e:
        logger.warning("[DB] Review log not persisted: %s", e)
        return None


def list_recent_reviews(limit: int = 20) -> List[Dict[str, Any]]:
    with SessionLocal() as session:
        rows = (
            session.query(ReviewLog)
            .order_by(ReviewLog.created_at.desc(), ReviewLog.id.desc())
            .limit(limit)
            .all()
        )
        return [row.to_dict() for row in rows]

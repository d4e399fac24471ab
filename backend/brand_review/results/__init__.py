from .grading import grade_for_score, pass_threshold, passes, status_for_score
from .models import CategoryScore, ComplianceResult, ResultWarning, Violation
from .parser import parse_agent_response, safe_load_json

__all__ = [
    "CategoryScore",
    "ComplianceResult",
    "ResultWarning",
    "Violation",
    "grade_for_score",
    "parse_agent_response",
    "pass_threshold",
    "passes",
    "safe_load_json",
    "status_for_score",
]

import math
from typing import Any, Dict, List, Optional

DEFAULT_PASS_THRESHOLD = 70

DEFAULT_CATEGORY_WEIGHTS: Dict[str, Any] = {
    "logo": 25,
    "colors": 25,
    "typography": 20,
    "accessibility": 20,
    "layout": 10,
}

DEFAULT_GRADING_SCALE: Dict[str, Any] = {
    "passThreshold": DEFAULT_PASS_THRESHOLD,
    "grades": [
        {"grade": "A", "minScore": 90, "status": "APPROVED"},
        {"grade": "B", "minScore": 80, "status": "APPROVED_WITH_NOTES"},
        {"grade": "C", "minScore": 70, "status": "APPROVED_WITH_NOTES"},
        {"grade": "D", "minScore": 60, "status": "NEEDS_REVISION"},
        {"grade": "F", "minScore": 0, "status": "REJECTED"},
    ],
}

VALID_STATUSES = ("APPROVED", "APPROVED_WITH_NOTES", "NEEDS_REVISION", "REJECTED")
PASSING_STATUSES = ("APPROVED", "APPROVED_WITH_NOTES")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _grades(grading_scale: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    grades = _as_dict(grading_scale).get("grades")
    if not isinstance(grades, list):
        grades = DEFAULT_GRADING_SCALE["grades"]
    usable = [g for g in grades if isinstance(g, dict) and _finite(g.get("minScore"))]
    return sorted(usable or DEFAULT_GRADING_SCALE["grades"], key=lambda g: g["minScore"], reverse=True)


def _band(score: int, grading_scale: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    for entry in _grades(grading_scale):
        if score >= entry["minScore"]:
            return entry
    return None


def pass_threshold(
    grading_scale: Optional[Dict[str, Any]] = None,
    scoring_rubric: Optional[Dict[str, Any]] = None,
) -> int:
    """
    The one pass mark used for both the prompt and the parsed result.

    A brand rubric's own gradingScale.passThreshold wins over the shared
    grading scale; 70 when neither carries a usable number.
    """
    rubric_scale = _as_dict(_as_dict(scoring_rubric).get("gradingScale"))
    for value in (rubric_scale.get("passThreshold"), _as_dict(grading_scale).get("passThreshold")):
        if _finite(value):
            return int(value)
    return DEFAULT_PASS_THRESHOLD


def passes(
    score: int,
    grading_scale: Optional[Dict[str, Any]] = None,
    threshold: Optional[int] = None,
) -> bool:
    if threshold is None:
        threshold = pass_threshold(grading_scale)
    return score >= threshold


def grade_for_score(score: int, grading_scale: Optional[Dict[str, Any]] = None) -> str:
    band = _band(score, grading_scale)
    return str(band.get("grade", "")) if band else "F"


def status_for_score(
    score: int,
    grading_scale: Optional[Dict[str, Any]] = None,
    threshold: Optional[int] = None,
) -> str:
    passed = passes(score, grading_scale, threshold)
    band = _band(score, grading_scale)
    status = band.get("status") if band else None
    if status in VALID_STATUSES:
        # A failing score is never reported as approved
        if status in PASSING_STATUSES and not passed:
            return "NEEDS_REVISION"
        return status

    # Scale entries without a status fall back to threshold bands
    if score >= 90 and passed:
        return "APPROVED"
    if passed:
        return "APPROVED_WITH_NOTES"
    if score >= 50:
        return "NEEDS_REVISION"
    return "REJECTED"

import json
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from brand_review.results.grading import (
    DEFAULT_CATEGORY_WEIGHTS,
    VALID_STATUSES,
    grade_for_score,
    pass_threshold,
    passes,
    status_for_score,
)
from brand_review.results.models import (
    CategoryScore,
    ComplianceResult,
    ResultWarning,
    Violation,
)

MAX_VIOLATIONS = 5
MAX_WARNINGS = 3
MAX_RECOMMENDATIONS = 3
MAX_FALLBACK_SUMMARY = 200

EMPTY_SUMMARY = "The agent response could not be interpreted."

RESULT_KEYS = {
    "complianceScore",
    "compliance_score",
    "score",
    "grade",
    "status",
    "passOrFail",
    "overallCompliance",
    "categoryScores",
    "violations",
    "criticalViolations",
    "warnings",
    "recommendations",
    "summary",
}

SEVERITY_ALIASES = {
    "critical": "critical",
    "high": "critical",
    "severe": "critical",
    "error": "critical",
    "major": "major",
    "medium": "major",
    "moderate": "major",
    "warning": "major",
    "minor": "minor",
    "low": "minor",
    "info": "minor",
}

FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
FENCE_CLOSE = re.compile(r"\s*```$")
NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
RULE_PREFIX = re.compile(r"^\[?([A-Z][A-Z0-9]*-\d+)\]?\s*[:\-–]\s*")

SCORE_PATTERNS = [
    re.compile(r"compliance[\s_]*score[\s*\"']*[:=\-]?[\s*\"']*(\d{1,3}(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"\b(\d{1,3}(?:\.\d+)?)\s*/\s*100\b"),
    re.compile(r"\bscore\b[^\d\n]{0,15}(\d{1,3}(?:\.\d+)?)", re.IGNORECASE),
]
SUMMARY_LINE = re.compile(r"^[\s#*]*summary[\s*]*:[\s*]*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)
STATUS_LINE = re.compile(
    r"status[\s*]*:[\s*]*(APPROVED_WITH_NOTES|APPROVED|NEEDS_REVISION|REJECTED)\b",
    re.IGNORECASE,
)
SECTION_HEADER = re.compile(
    r"^[\s#*]*(critical violations|violations|issues|warnings|recommendations|suggestions)[\s*]*:?[\s*]*$",
    re.IGNORECASE,
)
BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.*\S)")

SECTION_TARGETS = {
    "critical violations": ("violations", "critical"),
    "violations": ("violations", "major"),
    "issues": ("violations", "major"),
    "warnings": ("warnings", None),
    "recommendations": ("recommendations", None),
    "suggestions": ("recommendations", None),
}


# ============================================================
# SAFE JSON LOADER (LLM TRUST BOUNDARY)
# ============================================================

def strip_code_fences(text: str) -> str:
    text = FENCE_OPEN.sub("", text.strip())
    return FENCE_CLOSE.sub("", text.strip())


def safe_load_json(json_text: str) -> Dict[str, Any]:
    """
    Safely extract and parse a JSON object from LLM output.

    Strategy:
    1. Try direct json.loads (fast path)
    2. Fallback to extracting first JSON object
    3. Fail gracefully with empty dict

    NEVER throws.
    """
    if not json_text or not isinstance(json_text, str):
        return {}

    text = strip_code_fences(json_text)

    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        match = re.search(r"\{.*\}", text, re.DOTALL)
        if not match:
            return {}
        try:
            data = json.loads(match.group(0))
        except (ValueError, RecursionError):
            return {}

    return data if isinstance(data, dict) else {}


# ============================================================
# FIELD NORMALIZERS
# ============================================================

def coerce_number(value: Any) -> Optional[float]:
    """
    Accepts 85, 85.0, "85", "85/100", "85%". Booleans are not numbers here,
    and neither are NaN or values too large for a float.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        match = NUMBER.search(value)
        value = match.group(0) if match else None
    elif not isinstance(value, (int, float)):
        return None
    if value is None:
        return None

    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def clamp(value: float, low: int, high: int) -> int:
    return int(max(low, min(high, round(value))))


def normalize_severity(value: Any, default: str = "major") -> str:
    if not isinstance(value, str):
        return default
    return SEVERITY_ALIASES.get(value.strip().lower(), default)


def normalize_status(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    status = re.sub(r"[\s\-]+", "_", value.strip().upper())
    return status if status in VALID_STATUSES else None


def normalize_pass_or_fail(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "PASS" if value else "FAIL"
    if not isinstance(value, str):
        return None
    token = value.strip().upper()
    if token in ("PASS", "PASSED", "PASSING", "COMPLIANT"):
        return "PASS"
    if token in ("FAIL", "FAILED", "FAILING", "NON_COMPLIANT", "NON-COMPLIANT"):
        return "FAIL"
    return None


def _first_text(item: Dict[str, Any], keys: Tuple[str, ...]) -> str:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _split_rule_id(text: str) -> Tuple[str, str]:
    match = RULE_PREFIX.match(text)
    if match:
        return match.group(1), text[match.end():].strip()
    return "", text


def normalize_violation(item: Any, default_severity: str = "major") -> Optional[Violation]:
    if isinstance(item, str):
        rule_id, description = _split_rule_id(item.strip())
        if not description:
            return None
        return Violation(rule_id=rule_id, severity=default_severity, description=description)

    if isinstance(item, dict):
        description = _first_text(item, ("description", "message", "issue", "text", "violation"))
        if not description:
            return None
        return Violation(
            rule_id=_first_text(item, ("ruleId", "rule_id", "rule", "id")),
            severity=normalize_severity(item.get("severity"), default_severity),
            description=description,
        )

    return None


def normalize_warning(item: Any) -> Optional[ResultWarning]:
    if isinstance(item, str):
        text = item.strip()
    elif isinstance(item, dict):
        text = _first_text(item, ("description", "message", "warning", "text"))
    else:
        text = ""
    return ResultWarning(description=text) if text else None


def normalize_recommendation(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return item.strip() or None
    if isinstance(item, dict):
        text = _first_text(item, ("description", "recommendation", "text", "action"))
        if not text:
            text = next((v.strip() for v in item.values() if isinstance(v, str) and v.strip()), "")
        return text or None
    return None


def _collect(items: Any, normalize, limit: int) -> list:
    if limit <= 0:
        return []
    if not isinstance(items, list):
        items = [items] if items else []
    out = []
    for item in items:
        value = normalize(item)
        if value is not None:
            out.append(value)
        if len(out) >= limit:
            break
    return out


def normalize_category_scores(
    raw: Any,
    weights: Dict[str, Any],
) -> Tuple[Dict[str, CategoryScore], bool]:
    """
    Returns every weighted category plus any extra one the model scored with
    an explicit maxScore. The flag reports whether any score was supplied.
    """
    raw = raw if isinstance(raw, dict) else {}
    scores: Dict[str, CategoryScore] = {}
    supplied = False

    names = list(weights) + [n for n in raw if n not in weights]
    for name in names:
        entry = raw.get(name)
        default_max = coerce_number(weights.get(name))

        if isinstance(entry, dict):
            value = coerce_number(entry.get("score"))
            given_max = coerce_number(entry.get("maxScore", entry.get("max_score")))
        else:
            value = coerce_number(entry)
            given_max = None

        max_score = given_max if given_max and given_max > 0 else default_max
        if not max_score or max_score <= 0:
            continue

        max_int = int(round(max_score))
        if value is not None:
            supplied = True
        scores[name] = CategoryScore(
            score=clamp(value, 0, max_int) if value is not None else 0,
            max_score=max_int,
        )

    return scores, supplied


def _default_summary(score: int, violations: List[Violation], warnings: List[ResultWarning]) -> str:
    return (
        f"Design has {len(violations)} violation(s) and {len(warnings)} warning(s). "
        f"Score: {score}/100."
    )


def _unwrap(data: Dict[str, Any]) -> Dict[str, Any]:
    if RESULT_KEYS & data.keys():
        return data
    # {"result": {...}} style envelopes
    for value in data.values():
        if isinstance(value, dict) and RESULT_KEYS & value.keys():
            return value
    return data


# ============================================================
# JSON MODE
# ============================================================

def _from_json(
    data: Dict[str, Any],
    grading_scale: Optional[Dict[str, Any]],
    threshold: int,
    weights: Dict[str, Any],
) -> ComplianceResult:
    category_scores, supplied = normalize_category_scores(data.get("categoryScores"), weights)

    raw_score = None
    for key in ("complianceScore", "compliance_score", "score"):
        raw_score = coerce_number(data.get(key))
        if raw_score is not None:
            break
    if raw_score is None:
        raw_score = sum(c.score for c in category_scores.values()) if supplied else 0
    score = clamp(raw_score, 0, 100)

    violations = _collect(
        data.get("criticalViolations"),
        lambda v: normalize_violation(v, "critical"),
        MAX_VIOLATIONS,
    )
    violations += _collect(data.get("violations"), normalize_violation, MAX_VIOLATIONS - len(violations))
    warnings = _collect(data.get("warnings"), normalize_warning, MAX_WARNINGS)
    recommendations = _collect(data.get("recommendations"), normalize_recommendation, MAX_RECOMMENDATIONS)

    grade = data.get("grade")
    pass_or_fail = normalize_pass_or_fail(data.get("passOrFail", data.get("overallCompliance")))
    summary = data.get("summary")

    return ComplianceResult(
        compliance_score=score,
        grade=grade.strip() if isinstance(grade, str) and grade.strip() else grade_for_score(score, grading_scale),
        status=normalize_status(data.get("status")) or status_for_score(score, grading_scale, threshold),
        pass_or_fail=pass_or_fail or ("PASS" if passes(score, grading_scale, threshold) else "FAIL"),
        category_scores=category_scores,
        violations=violations,
        warnings=warnings,
        recommendations=recommendations,
        summary=summary.strip() if isinstance(summary, str) and summary.strip()
        else _default_summary(score, violations, warnings),
        parse_mode="json",
    )


# ============================================================
# TEXT MODE (regex fallback)
# ============================================================

def extract_score(text: str) -> Optional[float]:
    for pattern in SCORE_PATTERNS:
        match = pattern.search(text)
        if match:
            return float(match.group(1))
    return None


def extract_sections(text: str) -> Dict[str, List[Tuple[str, Optional[str]]]]:
    """
    Collect bullet items under known headings.

    A section runs until the next heading or the first non-bullet line;
    blank lines inside a section are tolerated.
    """
    sections: Dict[str, List[Tuple[str, Optional[str]]]] = {
        "violations": [],
        "warnings": [],
        "recommendations": [],
    }
    current = None

    for line in text.splitlines():
        header = SECTION_HEADER.match(line)
        if header:
            current = SECTION_TARGETS[header.group(1).lower()]
            continue
        if not line.strip():
            continue
        bullet = BULLET.match(line)
        if current and bullet:
            target, severity = current
            sections[target].append((bullet.group(1).strip(), severity))
        else:
            current = None

    return sections


def extract_category_scores(text: str, weights: Dict[str, Any]) -> Dict[str, Any]:
    found = {}
    for name in weights:
        pattern = re.compile(
            rf"^[\s\-*#]*{re.escape(name)}\w*[ \t*]*[:\-][ \t*]*(\d{{1,3}})\s*/\s*(\d{{1,3}})",
            re.IGNORECASE | re.MULTILINE,
        )
        match = pattern.search(text)
        if match:
            found[name] = {"score": int(match.group(1)), "maxScore": int(match.group(2))}
    return found


def _from_text(
    text: str,
    grading_scale: Optional[Dict[str, Any]],
    threshold: int,
    weights: Dict[str, Any],
) -> Optional[ComplianceResult]:
    raw_score = extract_score(text)
    sections = extract_sections(text)
    category_scores, supplied = normalize_category_scores(extract_category_scores(text, weights), weights)
    summary_match = SUMMARY_LINE.search(text)

    if raw_score is None and not supplied and not summary_match and not any(sections.values()):
        return None

    if raw_score is None:
        raw_score = sum(c.score for c in category_scores.values()) if supplied else 0
    score = clamp(raw_score, 0, 100)

    violations = _collect(
        sections["violations"],
        lambda item: normalize_violation(item[0], item[1] or "major"),
        MAX_VIOLATIONS,
    )
    warnings = _collect([t for t, _ in sections["warnings"]], normalize_warning, MAX_WARNINGS)
    recommendations = _collect(
        [t for t, _ in sections["recommendations"]], normalize_recommendation, MAX_RECOMMENDATIONS
    )

    status_match = STATUS_LINE.search(text)

    return ComplianceResult(
        compliance_score=score,
        grade=grade_for_score(score, grading_scale),
        status=normalize_status(status_match.group(1)) if status_match else status_for_score(score, grading_scale, threshold),
        pass_or_fail="PASS" if passes(score, grading_scale, threshold) else "FAIL",
        category_scores=category_scores,
        violations=violations,
        warnings=warnings,
        recommendations=recommendations,
        summary=summary_match.group(1).strip() if summary_match
        else _default_summary(score, violations, warnings),
        parse_mode="text",
    )


def _empty(text: str, grading_scale: Optional[Dict[str, Any]], weights: Dict[str, Any]) -> ComplianceResult:
    first_line = next((line.strip() for line in text.splitlines() if line.strip()), "")
    category_scores, _ = normalize_category_scores({}, weights)
    return ComplianceResult(
        compliance_score=0,
        grade=grade_for_score(0, grading_scale),
        status="REJECTED",
        pass_or_fail="FAIL",
        category_scores=category_scores,
        summary=first_line[:MAX_FALLBACK_SUMMARY] or EMPTY_SUMMARY,
        parse_mode="empty",
    )


# ============================================================
# ENTRY POINT
# ============================================================

def parse_agent_response(
    text: Optional[str],
    grading_scale: Optional[Dict[str, Any]] = None,
    category_weights: Optional[Dict[str, Any]] = None,
    threshold: Optional[int] = None,
) -> ComplianceResult:
    """
    Turn a raw agent reply into a ComplianceResult.

    JSON is preferred; a reply that does not parse as a result object is
    mined with regexes for a score, bullet sections and a summary line.
    Grade and status bands come from grading_scale; threshold overrides
    the scale's own pass mark when the brand rubric sets a different one.
    Always returns a result, never raises.
    """
    text = text if isinstance(text, str) else ""
    weights = category_weights or DEFAULT_CATEGORY_WEIGHTS
    if threshold is None:
        threshold = pass_threshold(grading_scale)

    data = _unwrap(safe_load_json(text))
    if RESULT_KEYS & data.keys():
        return _from_json(data, grading_scale, threshold, weights)

    result = _from_text(text, grading_scale, threshold, weights)
    if result is not None:
        return result

    return _empty(text, grading_scale, weights)

from typing import Any, Dict, List, Optional

from brand_review.brand.loader import BrandData
from brand_review.results.grading import DEFAULT_CATEGORY_WEIGHTS, pass_threshold

FALLBACK_SYSTEM_PROMPT = (
    "You are an expert brand compliance analyst. "
    "Analyze designs for brand guideline compliance."
)

CHAT_SYSTEM_PROMPT = (
    "You are a concise brand compliance assistant. "
    "Keep replies focused and actionable. "
    "Use short bullet points when listing multiple items. "
    "Avoid long introductions or repetition."
)

RESULT_SCHEMA = (
    '{"complianceScore":0,"grade":"",'
    '"status":"APPROVED|APPROVED_WITH_NOTES|NEEDS_REVISION|REJECTED",'
    '"passOrFail":"PASS|FAIL",'
    '"categoryScores":{"logo":{"score":0,"maxScore":25},"colors":{"score":0,"maxScore":25},'
    '"typography":{"score":0,"maxScore":20},"accessibility":{"score":0,"maxScore":20},'
    '"layout":{"score":0,"maxScore":10}},'
    '"violations":[{"ruleId":"","severity":"critical|major|minor","description":""}],'
    '"warnings":[{"description":""}],"recommendations":[""],"summary":""}'
)

OUTPUT_RULES = (
    "Rules: Max 5 violations, max 3 warnings, max 3 recommendations. "
    "Each 1 short sentence. Summary: 1 sentence."
)

IMAGE_PLACEHOLDER = "[Image attached for analysis]"


# ----------------------------
# Helpers
# ----------------------------

def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _swatches(group: Any) -> str:
    if not isinstance(group, list):
        return "Not specified"
    return ", ".join(
        f"{c.get('name', '')}: {c.get('hex', '')}" for c in group if isinstance(c, dict)
    )


def _px(value: Any) -> str:
    text = str(value).strip()
    if text.lower().endswith("px"):
        text = text[:-2].strip()
    try:
        number = float(text)
    except ValueError:
        return text
    return str(int(number)) if number.is_integer() else str(number)


def _rule_list(rules: Any) -> str:
    if not isinstance(rules, list):
        return ""
    return "; ".join(
        f"{r.get('name', '')}: {r.get('requirement', '')}"
        for r in rules
        if isinstance(r, dict) and r.get("requirement")
    )


def _text_list(items: Any) -> str:
    if not isinstance(items, list):
        return ""
    return "; ".join(str(i) for i in items if i)


def min_body_size(typography: Dict[str, Any]) -> str:
    size = _as_dict(_as_dict(typography.get("scale")).get("body")).get("size")
    if size is None:
        for rule in typography.get("rules") or []:
            if isinstance(rule, dict) and rule.get("ruleId") == "TYPE-003":
                size = rule.get("minValue")
                break
    return _px(size if size is not None else 16)


def category_weights(scoring_rubric: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    categories = _as_dict(_as_dict(scoring_rubric).get("categories"))
    weights = {
        name: data.get("weight")
        for name, data in categories.items()
        if isinstance(data, dict) and data.get("weight") is not None
    }
    return weights or dict(DEFAULT_CATEGORY_WEIGHTS)


def brand_pass_threshold(brand_data: Optional[BrandData]) -> int:
    if brand_data is None:
        return pass_threshold()
    return pass_threshold(brand_data.grading_scale, brand_data.scoring_rubric)


# ----------------------------
# Main
# ----------------------------

def generate_system_prompt(brand_data: Optional[BrandData]) -> str:
    """
    Build the brand reviewer system prompt.

    Pure function of the brand documents: the same data always yields the
    same prompt. Missing sections degrade to defaults rather than failing.
    """
    if brand_data is None:
        return FALLBACK_SYSTEM_PROMPT

    rules = _as_dict(brand_data.brand_rules)
    colors = _as_dict(rules.get("colors"))
    palette = _as_dict(colors.get("palette"))
    logo = _as_dict(rules.get("logo"))
    typography = _as_dict(rules.get("typography"))
    accessibility = _as_dict(rules.get("accessibility"))

    font_family = (
        _as_dict(_as_dict(typography.get("fonts")).get("primary")).get("family")
        or "Not specified"
    )
    a11y_standard = accessibility.get("standard") or "WCAG 2.1 AA"

    prohibited_colors = "; ".join(
        f"{c.get('hex', '')}: {c.get('reason', '')}"
        for c in colors.get("prohibitedColors") or []
        if isinstance(c, dict)
    )

    scoring = ", ".join(f"{name}/{weight}" for name, weight in category_weights(brand_data.scoring_rubric).items())

    lines: List[str] = [
        "You are a brand compliance reviewer. Return ONLY raw JSON, no other text.",
        "",
        f"Brand: {rules.get('brandName', 'Unknown')} ({rules.get('brandId', 'Unknown')})",
        (
            f"Colors — Primary: {_swatches(palette.get('primary'))}"
            f" | Secondary: {_swatches(palette.get('secondary'))}"
            f" | Accent: {_swatches(palette.get('accent'))}"
        ),
        f"Font: {font_family}, min {min_body_size(typography)}px | {a11y_standard}",
    ]

    optional_lines = [
        ("Logo rules", _rule_list(logo.get("rules"))),
        ("Logo prohibitions", _text_list(logo.get("prohibitions"))),
        ("Prohibited colors", prohibited_colors),
        ("Accessibility rules", _rule_list(accessibility.get("rules"))),
    ]
    lines.extend(f"{label}: {text}" for label, text in optional_lines if text)

    lines.extend([
        f"Scoring: {scoring}. Pass≥{brand_pass_threshold(brand_data)}.",
        "",
        "Return this exact JSON schema:",
        RESULT_SCHEMA,
        "",
        OUTPUT_RULES,
    ])

    return "\n".join(lines)


def build_review_query(
    image_base64: str,
    mime_type: str,
    brand_name: str,
    design_type: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    """Compose the user message for an uploaded design, with the image inlined as a data URI."""
    parts = [f"Review this design for {brand_name} brand compliance."]
    if design_type:
        parts.append(f"Design type: {design_type}.")
    if notes:
        parts.append(f"Reviewer notes: {notes}")
    parts.append(f"data:{mime_type};base64,{image_base64}")
    return "\n".join(parts)


def build_chat_query(question: str, previous_result: Optional[Dict[str, Any]] = None) -> str:
    if not previous_result:
        return question

    context = [
        "Context from the previous compliance review:",
        f"- Score: {previous_result.get('complianceScore', 'unknown')}/100"
        f" ({previous_result.get('status', 'unknown')})",
    ]
    for v in (previous_result.get("violations") or [])[:5]:
        if isinstance(v, dict):
            context.append(f"- Violation ({v.get('severity', 'major')}): {v.get('description', '')}")
        else:
            context.append(f"- Violation: {v}")
    if previous_result.get("summary"):
        context.append(f"- Summary: {previous_result['summary']}")

    return "\n".join(context + ["", f"Question: {question}"])

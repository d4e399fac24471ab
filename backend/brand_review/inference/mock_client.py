"""
Offline stand-in for the hosted agent.

Enabled with USE_MOCK_API=true. Produces a plain-text report shaped like
an unstructured model reply, so it also exercises the text fallback of
the response parser.
"""

from typing import Dict, List

from brand_review.inference.base import LLMClient


def generate_mock_response(query: str) -> str:
    query = query or ""
    is_oad_brand = "One A Day" in query or "OAD" in query
    has_image = "data:image" in query

    score = 85
    violations: List[str] = []
    warnings: List[str] = []
    recommendations: List[str] = []

    if not is_oad_brand:
        violations.append("Incorrect brand identity - should be One A Day (OAD)")
        score -= 20

    if not has_image:
        warnings.append("No image provided for visual analysis")
        score -= 10

    if "logo" in query:
        if "small" in query or "tiny" in query:
            violations.append("Logo too small - minimum 120px width required")
            score -= 15
        else:
            recommendations.append("Logo placement and size appear appropriate")

    if "color" in query or "#FF6600" in query:
        if "wrong" in query or "incorrect" in query:
            violations.append("Incorrect color usage - must use OAD brand colors (#FF6600, #333333)")
            score -= 10
        else:
            recommendations.append("Color palette follows OAD brand guidelines")

    if "font" in query or "typography" in query:
        if "wrong" in query or "arial" in query or "times" in query:
            warnings.append("Non-standard font detected - recommend Helvetica Neue")
            score -= 5

    if score >= 90:
        summary = "Excellent compliance with OAD brand guidelines"
    elif score >= 70:
        summary = "Good compliance with minor issues to address"
    else:
        summary = "Significant compliance issues requiring attention"

    lines = [
        "Brand Compliance Analysis Complete",
        "",
        f"Compliance Score: {score}/100",
        "",
        f"Summary: {summary}",
        "",
    ]

    for title, items in (
        ("Critical Violations", violations),
        ("Warnings", warnings),
        ("Recommendations", recommendations),
    ):
        if items:
            lines.append("")
            lines.append(f"{title}:")
            lines.extend(f"- {item}" for item in items)

    lines.extend(["", "Detailed Analysis:", "", "Logo Usage:"])
    if "logo" in query:
        lines.append("Logo appears to be properly positioned with adequate clearspace.")
    else:
        lines.append("No logo detected in the design.")

    lines.extend([
        "",
        "Color Palette:",
        "Primary OAD orange (#FF6600) should be the dominant brand color.",
        "Secondary dark gray (#333333) provides good contrast.",
        "",
        "Typography:",
        "Helvetica Neue is the recommended typeface for OAD communications.",
        "Font sizes should maintain minimum 14px for accessibility.",
        "",
        "Accessibility:",
        "Design meets WCAG AA contrast requirements (4.5:1 ratio).",
        "All interactive elements are properly sized and spaced.",
    ])

    return "\n".join(lines) + "\n"


class MockAgentClient(LLMClient):
    """Answers from the user turn of the conversation without any network call."""

    def generate(self, messages: List[Dict], max_tokens: int = 800, temperature: float = 0.15) -> str:
        query = ""
        for message in messages:
            if message.get("role") != "user":
                continue
            content = message.get("content")
            if isinstance(content, str):
                query += content
            elif isinstance(content, list):
                for part in content:
                    if part.get("type") == "text":
                        query += part.get("text", "")
                    elif part.get("type") == "image_url":
                        query += " " + part.get("image_url", {}).get("url", "")
        return generate_mock_response(query)

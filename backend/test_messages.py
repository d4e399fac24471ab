"""Tests for vision / chat dispatch"""

from brand_review.brand.loader import load_brand_data
from brand_review.inference.messages import build_agent_request, find_embedded_image
from brand_review.inference.prompt import CHAT_SYSTEM_PROMPT, FALLBACK_SYSTEM_PROMPT

IMAGE = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


def test_text_query_uses_chat_shape():
    request = build_agent_request("What fonts are approved?")

    assert request.is_chat
    assert request.mode == "chat"
    assert request.max_tokens == 500
    assert request.temperature == 0.3
    assert request.messages == [
        {"role": "system", "content": CHAT_SYSTEM_PROMPT},
        {"role": "user", "content": "What fonts are approved?"},
    ]


def test_image_query_uses_vision_shape():
    query = f"Review this banner.\ndata:image/png;base64,{IMAGE}"
    request = build_agent_request(query, load_brand_data("OAD"))

    assert not request.is_chat
    assert request.mode == "vision"
    assert request.max_tokens == 800
    assert request.temperature == 0.15
    assert request.mime_type == "image/png"

    system, user = request.messages
    assert system["role"] == "system"
    assert "Brand: One A Day (OAD)" in system["content"]

    text_part, image_part = user["content"]
    assert text_part == {"type": "text", "text": "Review this banner.\n[Image attached for analysis]"}
    assert image_part == {
        "type": "image_url",
        "image_url": {"url": f"data:image/png;base64,{IMAGE}", "detail": "high"},
    }


def test_vision_without_brand_data_uses_fallback_prompt():
    request = build_agent_request(f"data:image/jpeg;base64,{IMAGE}", None)
    assert request.messages[0]["content"] == FALLBACK_SYSTEM_PROMPT
    assert request.mime_type == "image/jpeg"


def test_non_image_data_uri_is_chat():
    request = build_agent_request("data:application/pdf;base64,JVBERi0xLjQ=")
    assert request.is_chat


def test_find_embedded_image_handles_empty():
    assert find_embedded_image("") is None
    assert find_embedded_image(None) is None


def test_image_size_reported_in_kb():
    payload = "A" * 4096
    request = build_agent_request(f"data:image/png;base64,{payload}")
    assert request.image_kb == 4

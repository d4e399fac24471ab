import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from brand_review.brand.loader import BrandData
from brand_review.inference.prompt import (
    CHAT_SYSTEM_PROMPT,
    IMAGE_PLACEHOLDER,
    generate_system_prompt,
)

IMAGE_DATA_URI = re.compile(r"data:(image/[^;]+);base64,([A-Za-z0-9+/=]+)")

VISION_MAX_TOKENS = 800
VISION_TEMPERATURE = 0.15
CHAT_MAX_TOKENS = 500
CHAT_TEMPERATURE = 0.3


@dataclass
class AgentRequest:
    messages: List[Dict]
    max_tokens: int
    temperature: float
    is_chat: bool
    mime_type: Optional[str] = None
    image_kb: int = 0

    @property
    def mode(self) -> str:
        return "chat" if self.is_chat else "vision"


def find_embedded_image(query: str) -> Optional[re.Match]:
    if not query:
        return None
    return IMAGE_DATA_URI.search(query)


def build_agent_request(query: str, brand_data: Optional[BrandData] = None) -> AgentRequest:
    """
    Pick the completion shape from the payload.

    A query carrying a base64 image data URI becomes a vision request with
    the brand system prompt; anything else is a follow-up chat turn that
    carries its own instructions.
    """
    match = find_embedded_image(query)

    if match is None:
        return AgentRequest(
            messages=[
                {"role": "system", "content": CHAT_SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            max_tokens=CHAT_MAX_TOKENS,
            temperature=CHAT_TEMPERATURE,
            is_chat=True,
        )

    mime_type, base64_data = match.group(1), match.group(2)
    text_query = query.replace(match.group(0), IMAGE_PLACEHOLDER, 1)

    return AgentRequest(
        messages=[
            {"role": "system", "content": generate_system_prompt(brand_data)},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": text_query},
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{mime_type};base64,{base64_data}",
                            "detail": "high",
                        },
                    },
                ],
            },
        ],
        max_tokens=VISION_MAX_TOKENS,
        temperature=VISION_TEMPERATURE,
        is_chat=False,
        mime_type=mime_type,
        image_kb=round(len(base64_data) / 1024),
    )

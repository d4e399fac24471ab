import logging
from dataclasses import dataclass
from typing import Optional

from brand_review.brand.loader import BrandData, load_brand_data
from brand_review.config import get_foundry_config
from brand_review.inference.base import LLMClient
from brand_review.inference.config import get_llm_client
from brand_review.inference.messages import build_agent_request, find_embedded_image

logger = logging.getLogger(__name__)


@dataclass
class AgentReply:
    content: str
    mode: str  # vision | chat
    brand_data: Optional[BrandData] = None


def call_foundry_agent(
    agent_id: Optional[str],
    query: str,
    endpoint: Optional[str] = None,
    brand_id: Optional[str] = None,
    client: Optional[LLMClient] = None,
) -> AgentReply:
    """
    Send one query to the hosted agent.

    Image queries get the brand system prompt and the vision message shape;
    plain text is treated as a chat follow-up. Raises FoundryAgentError.
    """
    config = get_foundry_config()
    client = client or get_llm_client(config)
    brand_id = brand_id or config.default_brand_id

    logger.info("[Agent] Received request for agent: %s", agent_id)
    logger.info("[Agent] Query length: %d", len(query or ""))
    if endpoint:
        logger.debug("[Agent] Client supplied endpoint %s (requests go to the configured deployment)", endpoint)

    brand_data = None
    if find_embedded_image(query):
        brand_data = load_brand_data(brand_id, config.brand_data_dir)
        logger.info("[Agent] Brand data loaded: %s", "Yes" if brand_data else "No (using fallback)")

    request = build_agent_request(query, brand_data)

    if request.is_chat:
        logger.info("[Agent] No image detected, using text-only format")
    else:
        logger.info("[Agent] Image detected, using Vision API format")
        logger.info("[Agent] Image MIME type: %s", request.mime_type)
        logger.info("[Agent] Image size (base64): %d KB", request.image_kb)

    content = client.generate(
        request.messages,
        max_tokens=request.max_tokens,
        temperature=request.temperature,
    )

    return AgentReply(content=content, mode=request.mode, brand_data=brand_data)

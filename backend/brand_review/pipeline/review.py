import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from brand_review.brand.loader import BrandData, load_brand_data, load_grading_scale
from brand_review.config import get_foundry_config
from brand_review.db.reviews import record_review
from brand_review.inference.base import LLMClient
from brand_review.inference.prompt import (
    brand_pass_threshold,
    build_chat_query,
    build_review_query,
    category_weights,
)
from brand_review.pipeline.agent import call_foundry_agent
from brand_review.results.models import ComplianceResult
from brand_review.results.parser import parse_agent_response

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    result: ComplianceResult
    raw_response: str
    brand_id: str


def parse_for_brand(text: Optional[str], brand_data: Optional[BrandData]) -> ComplianceResult:
    """
    Normalize a reply against the brand's rubric, or the defaults without one.
    The pass mark is the one the system prompt quoted to the model.
    """
    if brand_data is None:
        return parse_agent_response(text, grading_scale=load_grading_scale())
    return parse_agent_response(
        text,
        grading_scale=brand_data.grading_scale,
        category_weights=category_weights(brand_data.scoring_rubric),
        threshold=brand_pass_threshold(brand_data),
    )


def run_design_review(
    image_base64: str,
    mime_type: str,
    brand_id: Optional[str] = None,
    design_type: Optional[str] = None,
    notes: Optional[str] = None,
    agent_id: Optional[str] = None,
    client: Optional[LLMClient] = None,
) -> ReviewOutcome:
    config = get_foundry_config()
    brand_id = brand_id or config.default_brand_id
    brand_data = load_brand_data(brand_id, config.brand_data_dir)
    brand_name = (brand_data.brand_rules.get("brandName") if brand_data else None) or brand_id

    query = build_review_query(image_base64, mime_type, brand_name, design_type, notes)
    reply = call_foundry_agent(
        agent_id or config.agent_id,
        query,
        brand_id=brand_id,
        client=client,
    )

    result = parse_for_brand(reply.content, reply.brand_data or brand_data)
    logger.info(
        "[Review] %s scored %d (%s, parsed as %s)",
        brand_id, result.compliance_score, result.status, result.parse_mode,
    )

    record_review(
        mode=reply.mode,
        query_chars=len(query),
        response=reply.content,
        agent_id=agent_id or config.agent_id,
        brand_id=brand_id,
        compliance_score=result.compliance_score,
        status=result.status,
        parse_mode=result.parse_mode,
    )

    return ReviewOutcome(result=result, raw_response=reply.content, brand_id=brand_id)


def run_chat(
    question: str,
    previous_result: Optional[Dict[str, Any]] = None,
    agent_id: Optional[str] = None,
    client: Optional[LLMClient] = None,
) -> str:
    query = build_chat_query(question, previous_result)
    reply = call_foundry_agent(agent_id or get_foundry_config().agent_id, query, client=client)
    record_review(mode=reply.mode, query_chars=len(query), response=reply.content, agent_id=agent_id)
    return reply.content

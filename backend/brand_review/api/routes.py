import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, File, Query, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from brand_review.attachments import parse_email, prepare_pdf
from brand_review.brand.loader import list_brands, load_brand_data, load_brand_rules
from brand_review.config import get_foundry_config
from brand_review.db.reviews import list_recent_reviews, record_review
from brand_review.errors import BrandNotFoundError, FoundryAgentError
from brand_review.pipeline import call_foundry_agent, parse_for_brand, run_chat, run_design_review
from brand_review.schemas import (
    ChatRequest,
    FoundryAgentRequest,
    ParseResponseRequest,
    ReviewRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _agent_failure(e: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Failed to call Foundry agent",
            "message": str(e),
            "timestamp": now_iso(),
        },
    )


def _read_upload(upload: UploadFile, limit: int) -> Optional[bytes]:
    """Read at most limit bytes; None means the upload is over the limit."""
    data = upload.file.read(limit + 1)
    return None if len(data) > limit else data


def _too_large(limit: int) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"error": f"File exceeds the {limit // (1024 * 1024)}MB upload limit"},
    )


def _clean_base64(value: str) -> str:
    # Browsers hand over FileReader data URLs; keep only the payload
    if value.startswith("data:") and "," in value:
        value = value.split(",", 1)[1]
    return "".join(value.split())


# ============================================================
# AGENT ENDPOINTS
# ============================================================

@router.post("/api/foundry-agent")
def foundry_agent(request: FoundryAgentRequest):
    """Raw pass-through: the agent's text comes back untouched."""
    try:
        reply = call_foundry_agent(
            request.agentId,
            request.query,
            endpoint=request.endpoint,
            brand_id=request.brandId,
        )
    except FoundryAgentError as e:
        logger.error("[Routes] Foundry agent error: %s", e)
        return _agent_failure(e)

    record_review(
        mode=reply.mode,
        query_chars=len(request.query),
        response=reply.content,
        agent_id=request.agentId,
        brand_id=request.brandId,
    )

    return {
        "response": reply.content,
        "timestamp": now_iso(),
        "agentId": request.agentId,
    }


@router.post("/api/review")
def review_design(request: ReviewRequest):
    """Analyze one design and return the normalized compliance result."""
    try:
        outcome = run_design_review(
            image_base64=_clean_base64(request.imageBase64),
            mime_type=request.imageMimeType,
            brand_id=request.brandId,
            design_type=request.designType,
            notes=request.notes,
            agent_id=request.agentId,
        )
    except FoundryAgentError as e:
        logger.error("[Routes] Review failed for %s: %s", request.imageName or "upload", e)
        return _agent_failure(e)

    payload = outcome.result.to_wire()
    payload.update({
        "brandId": outcome.brand_id,
        "rawResponse": outcome.raw_response,
        "timestamp": now_iso(),
    })
    return payload


@router.post("/api/chat")
def chat(request: ChatRequest):
    try:
        reply = run_chat(request.question, request.previousResult, agent_id=request.agentId)
    except FoundryAgentError as e:
        logger.error("[Routes] Chat failed: %s", e)
        return _agent_failure(e)

    return {"reply": reply, "timestamp": now_iso()}


@router.post("/api/parse-response")
def parse_response(request: ParseResponseRequest):
    """Normalize an agent reply the client already holds, without calling the agent."""
    brand_id = request.brandId or get_foundry_config().default_brand_id
    result = parse_for_brand(request.response, load_brand_data(brand_id))
    return result.to_wire()


# ============================================================
# BRAND ENDPOINTS
# ============================================================

@router.get("/api/brands")
def brands():
    return {"brands": list_brands()}


@router.get("/api/brand-rules/{brand_id}")
def brand_rules(brand_id: str):
    try:
        return load_brand_rules(brand_id)
    except BrandNotFoundError:
        return JSONResponse(status_code=404, content={"error": "Brand rules not found"})
    except (OSError, ValueError) as e:
        logger.error("[Routes] Error loading brand rules: %s", e)
        return JSONResponse(status_code=500, content={"error": "Failed to load brand rules"})


# ============================================================
# UPLOAD ENDPOINTS
# ============================================================

@router.post("/api/parse-email")
def parse_email_upload(email: Optional[UploadFile] = File(None)):
    if email is None:
        return JSONResponse(status_code=400, content={"error": "No email file provided"})

    limit = get_foundry_config().max_upload_bytes
    logger.info("[Routes] Parsing email: %s", email.filename)

    try:
        raw = _read_upload(email, limit)
        if raw is None:
            return _too_large(limit)
        parsed = parse_email(raw)
    except Exception as e:
        logger.exception("[Routes] Email parsing error")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to parse email", "details": str(e)},
        )

    return {
        "success": True,
        "emailSubject": parsed.subject,
        "emailFrom": parsed.sender,
        "emailDate": parsed.date,
        "images": [img.to_dict() for img in parsed.images],
    }


@router.post("/api/parse-pdf")
def parse_pdf_upload(pdf: Optional[UploadFile] = File(None)):
    if pdf is None:
        return JSONResponse(status_code=400, content={"error": "No PDF file provided"})

    limit = get_foundry_config().max_upload_bytes

    try:
        raw = _read_upload(pdf, limit)
        if raw is None:
            return _too_large(limit)
        logger.info("[Routes] Processing PDF: %s (%dKB)", pdf.filename, round(len(raw) / 1024))
        images = prepare_pdf(pdf.filename or "document.pdf", raw)
    except Exception as e:
        logger.exception("[Routes] PDF processing error")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process PDF", "details": str(e)},
        )

    return {
        "success": True,
        "message": "PDF will be analyzed directly by AI",
        "images": images,
    }


# ============================================================
# HISTORY & HEALTH
# ============================================================

@router.get("/api/reviews")
def recent_reviews(limit: int = Query(20, ge=1, le=200)):
    try:
        return {"reviews": list_recent_reviews(limit)}
    except SQLAlchemyError as e:
        logger.error("[Routes] Review log unavailable: %s", e)
        return JSONResponse(status_code=503, content={"error": "Review log unavailable"})


@router.get("/health")
def health():
    config = get_foundry_config()
    return {
        "status": "healthy",
        "timestamp": now_iso(),
        "config": {
            "foundryEndpoint": bool(config.endpoint),
            "agentId": bool(config.agent_id),
            "azureOpenaiConfigured": config.azure_openai_configured,
        },
    }

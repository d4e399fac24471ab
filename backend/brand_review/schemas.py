from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class FoundryAgentRequest(BaseModel):
    agentId: Optional[str] = None
    query: str
    endpoint: Optional[str] = None
    brandId: Optional[str] = None


class ReviewRequest(BaseModel):
    """An uploaded design, base64 encoded (a full data URI is accepted too)."""
    imageBase64: str = Field(min_length=1)
    imageMimeType: str = Field(default="image/png", pattern=r"^image/[A-Za-z0-9.+-]+$")
    imageName: Optional[str] = None
    brandId: Optional[str] = None
    designType: Optional[str] = None
    notes: Optional[str] = None
    submittedBy: Optional[str] = None
    agentId: Optional[str] = None


class ChatRequest(BaseModel):
    question: str = Field(min_length=1)
    previousResult: Optional[Dict[str, Any]] = None
    agentId: Optional[str] = None


class ParseResponseRequest(BaseModel):
    response: str
    brandId: Optional[str] = None

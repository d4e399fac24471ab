from .azure_openai_client import AzureOpenAIClient
from .base import LLMClient
from .config import get_llm_client
from .messages import AgentRequest, build_agent_request
from .mock_client import MockAgentClient, generate_mock_response
from .prompt import build_chat_query, build_review_query, generate_system_prompt

__all__ = [
    "AgentRequest",
    "AzureOpenAIClient",
    "LLMClient",
    "MockAgentClient",
    "build_agent_request",
    "build_chat_query",
    "build_review_query",
    "generate_mock_response",
    "generate_system_prompt",
    "get_llm_client",
]

from typing import Optional

from brand_review.config import FoundryConfig, get_foundry_config
from .azure_openai_client import AzureOpenAIClient
from .base import LLMClient
from .mock_client import MockAgentClient


def get_llm_client(config: Optional[FoundryConfig] = None) -> LLMClient:
    config = config or get_foundry_config()
    if config.use_mock_api:
        return MockAgentClient()
    return AzureOpenAIClient.from_config(config)

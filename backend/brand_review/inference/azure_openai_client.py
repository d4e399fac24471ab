import logging
from typing import Dict, List, Optional

import requests

from brand_review.config import DEFAULT_API_VERSION, FoundryConfig
from brand_review.errors import FoundryAgentError
from brand_review.inference.base import LLMClient

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    401: "Invalid API key. Please check your AZURE_OPENAI_API_KEY.",
    404: "Deployment not found. Please check your AZURE_OPENAI_DEPLOYMENT.",
    429: "Rate limit exceeded. Please try again later.",
}

TIMEOUT_MESSAGE = "Request timeout. The analysis is taking too long."


def _error_detail(response: Optional[requests.Response]) -> Optional[str]:
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("message")
    return None


class AzureOpenAIClient(LLMClient):
    def __init__(
        self,
        endpoint: str,
        deployment: str,
        api_key: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 120.0,
    ):
        self.endpoint = (endpoint or "").rstrip("/")
        self.deployment = deployment
        self.api_key = api_key
        self.api_version = api_version
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: FoundryConfig) -> "AzureOpenAIClient":
        return cls(
            endpoint=config.azure_openai_endpoint,
            deployment=config.azure_openai_deployment,
            api_key=config.api_key,
            api_version=config.api_version,
            timeout=config.timeout,
        )

    @property
    def url(self) -> str:
        return (
            f"{self.endpoint}/openai/deployments/{self.deployment}"
            f"/chat/completions?api-version={self.api_version}"
        )

    def generate(self, messages: List[Dict], max_tokens: int = 800, temperature: float = 0.15) -> str:
        logger.info("[Agent] Calling Azure OpenAI deployment %s at %s", self.deployment, self.endpoint)

        try:
            response = requests.post(
                self.url,
                json={
                    "messages": messages,
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                },
                headers={
                    "Content-Type": "application/json",
                    "api-key": self.api_key,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            content = self._extract_content(response.json())
        except requests.Timeout as e:
            logger.error("[Agent] Azure OpenAI request timed out: %s", e)
            raise FoundryAgentError(TIMEOUT_MESSAGE) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            detail = _error_detail(e.response)
            logger.error("[Agent] Azure OpenAI returned %s: %s", status, detail or e)
            if status in STATUS_MESSAGES:
                raise FoundryAgentError(STATUS_MESSAGES[status], status_code=status) from e
            raise FoundryAgentError(
                f"Azure OpenAI call failed: {detail or e}", status_code=status
            ) from e
        except (requests.RequestException, ValueError) as e:
            logger.error("[Agent] Error calling Azure OpenAI: %s", e)
            raise FoundryAgentError(f"Azure OpenAI call failed: {e}") from e

        logger.info("[Agent] Azure OpenAI response received, length: %d chars", len(content))
        return content

    @staticmethod
    def _extract_content(data: Dict) -> str:
        choices = (data.get("choices") or []) if isinstance(data, dict) else []
        message = choices[0].get("message") if choices and isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content:
            raise ValueError("No response content from Azure OpenAI")
        return content

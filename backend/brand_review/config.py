import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

DEFAULT_API_VERSION = "2024-08-01-preview"
DEFAULT_BRAND_DATA_DIR = Path(__file__).resolve().parent / "brand_data"

PORT = int(os.getenv("PORT", "3001"))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./brand_review.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

REQUIRED_KEYS = [
    "endpoint",
    "agent_id",
    "azure_openai_endpoint",
    "azure_openai_deployment",
    "api_key",
]

ENV_NAMES = {
    "endpoint": "FOUNDRY_ENDPOINT",
    "agent_id": "FOUNDRY_AGENT_ID",
    "azure_openai_endpoint": "AZURE_OPENAI_ENDPOINT",
    "azure_openai_deployment": "AZURE_OPENAI_DEPLOYMENT",
    "api_key": "AZURE_OPENAI_API_KEY",
}


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in ("1", "true", "yes")


@dataclass
class FoundryConfig:
    endpoint: Optional[str] = None
    agent_id: Optional[str] = None
    azure_openai_endpoint: Optional[str] = None
    azure_openai_deployment: Optional[str] = None
    api_key: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 120.0
    use_mock_api: bool = False
    default_brand_id: str = "OAD"
    brand_data_dir: Path = DEFAULT_BRAND_DATA_DIR
    max_upload_bytes: int = 25 * 1024 * 1024

    @property
    def azure_openai_configured(self) -> bool:
        return bool(self.azure_openai_endpoint and self.api_key)


def get_foundry_config() -> FoundryConfig:
    """
    Snapshot the agent configuration from the environment.
    Read on every call so a changed environment is picked up without a restart.
    """
    return FoundryConfig(
        endpoint=os.getenv("FOUNDRY_ENDPOINT"),
        agent_id=os.getenv("FOUNDRY_AGENT_ID"),
        azure_openai_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT"),
        azure_openai_deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT"),
        api_key=os.getenv("AZURE_OPENAI_API_KEY"),
        api_version=os.getenv("AZURE_OPENAI_API_VERSION", DEFAULT_API_VERSION),
        timeout=float(os.getenv("AZURE_OPENAI_TIMEOUT", "120")),
        use_mock_api=_env_flag("USE_MOCK_API"),
        default_brand_id=os.getenv("DEFAULT_BRAND_ID", "OAD"),
        brand_data_dir=Path(os.getenv("BRAND_DATA_DIR") or DEFAULT_BRAND_DATA_DIR),
        max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(25 * 1024 * 1024))),
    )


def validate_config(config: FoundryConfig) -> List[str]:
    """Return the required keys that are not set."""
    return [key for key in REQUIRED_KEYS if not getattr(config, key)]

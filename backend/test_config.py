"""Tests for environment configuration"""

from brand_review.config import FoundryConfig, get_foundry_config, validate_config


def test_unconfigured_environment_reports_all_keys():
    config = get_foundry_config()
    assert validate_config(config) == [
        "endpoint",
        "agent_id",
        "azure_openai_endpoint",
        "azure_openai_deployment",
        "api_key",
    ]
    assert not config.azure_openai_configured
    assert config.use_mock_api is False
    assert config.api_version == "2024-08-01-preview"


def test_configured_environment(azure_env, monkeypatch):
    monkeypatch.setenv("USE_MOCK_API", "TRUE")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "1024")

    config = get_foundry_config()
    assert validate_config(config) == []
    assert config.azure_openai_configured
    assert config.use_mock_api is True
    assert config.max_upload_bytes == 1024
    assert config.default_brand_id == "OAD"


def test_partial_configuration():
    config = FoundryConfig(azure_openai_endpoint="https://x", api_key="k")
    assert config.azure_openai_configured
    assert validate_config(config) == ["endpoint", "agent_id", "azure_openai_deployment"]

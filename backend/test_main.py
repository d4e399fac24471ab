"""Tests for the server launcher"""

import logging

import pytest
import uvicorn

from brand_review import main


@pytest.fixture
def served(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def test_run_exits_when_configuration_missing(served, caplog):
    with caplog.at_level(logging.INFO, logger="brand_review.main"):
        with pytest.raises(SystemExit) as exc:
            main.run()

    assert exc.value.code == 1
    assert served == []
    for name in ("FOUNDRY_ENDPOINT", "FOUNDRY_AGENT_ID", "AZURE_OPENAI_API_KEY"):
        assert f"{name}=your_value_here" in caplog.text


def test_run_serves_in_mock_mode(served, mock_agent):
    main.run()

    app, kwargs = served[0]
    assert app is main.app
    assert kwargs == {"host": "0.0.0.0", "port": main.PORT}


def test_run_serves_when_configured(served, azure_env):
    main.run()
    assert len(served) == 1

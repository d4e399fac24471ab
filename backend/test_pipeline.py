"""Tests for the review pipeline and its review log"""

import copy
import logging

import pytest
from sqlalchemy.orm import sessionmaker

from brand_review.brand.loader import load_brand_data
from brand_review.db import reviews
from brand_review.db.session import make_engine
from brand_review.inference.base import LLMClient
from brand_review.inference.prompt import generate_system_prompt
from brand_review.pipeline import parse_for_brand, run_design_review


class CannedClient(LLMClient):
    def __init__(self, reply):
        self.reply = reply
        self.messages = None

    def generate(self, messages, max_tokens=800, temperature=0.15):
        self.messages = messages
        return self.reply


@pytest.fixture
def strict_brand():
    """OAD with a rubric pass mark above the shared scale's."""
    data = copy.deepcopy(load_brand_data("OAD"))
    data.scoring_rubric["gradingScale"]["passThreshold"] = 75
    data.grading_scale["passThreshold"] = 70
    return data


@pytest.fixture
def broken_review_log(monkeypatch):
    """A session factory whose database has no review_logs table."""
    engine = make_engine("sqlite://")
    monkeypatch.setattr(reviews, "SessionLocal", sessionmaker(bind=engine))


def test_prompt_and_result_share_pass_mark(strict_brand):
    assert "Pass≥75." in generate_system_prompt(strict_brand)

    result = parse_for_brand('{"complianceScore": 72}', strict_brand)
    assert result.pass_or_fail == "FAIL"
    assert result.status == "NEEDS_REVISION"

    assert parse_for_brand('{"complianceScore": 76}', strict_brand).pass_or_fail == "PASS"


def test_design_review_with_injected_client():
    client = CannedClient('{"complianceScore": 91, "summary": "Clean layout."}')

    outcome = run_design_review("QUJD", "image/png", brand_id="OAD", client=client)

    assert outcome.brand_id == "OAD"
    assert outcome.result.grade == "A"
    assert outcome.result.summary == "Clean layout."
    assert "Brand: One A Day (OAD)" in client.messages[0]["content"]
    assert client.messages[1]["content"][1]["image_url"]["url"] == "data:image/png;base64,QUJD"


def test_record_review_swallows_database_errors(broken_review_log, caplog):
    with caplog.at_level(logging.WARNING, logger="brand_review.db.reviews"):
        assert reviews.record_review(mode="chat", query_chars=5, response="hi") is None

    assert "Review log not persisted" in caplog.text


def test_review_survives_broken_review_log(client, mock_agent, broken_review_log):
    resp = client.post("/api/review", json={"imageBase64": "QUJD"})

    assert resp.status_code == 200
    assert resp.json()["complianceScore"] == 85

    history = client.get("/api/reviews")
    assert history.status_code == 503
    assert history.json() == {"error": "Review log unavailable"}

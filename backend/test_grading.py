"""Tests for grade / status / pass derivation"""

from brand_review.brand.loader import load_grading_scale
from brand_review.results.grading import grade_for_score, pass_threshold, passes, status_for_score


def test_default_scale_bands():
    expected = [
        (100, "A", "APPROVED"),
        (90, "A", "APPROVED"),
        (89, "B", "APPROVED_WITH_NOTES"),
        (70, "C", "APPROVED_WITH_NOTES"),
        (69, "D", "NEEDS_REVISION"),
        (59, "F", "REJECTED"),
        (0, "F", "REJECTED"),
    ]
    for score, grade, status in expected:
        assert grade_for_score(score) == grade, score
        assert status_for_score(score) == status, score


def test_shipped_scale_matches_default():
    scale = load_grading_scale()
    assert scale is not None
    assert pass_threshold(scale) == 70
    for score in (95, 85, 75, 65, 10):
        assert grade_for_score(score, scale) == grade_for_score(score)
        assert status_for_score(score, scale) == status_for_score(score)


def test_pass_threshold_boundary():
    assert passes(70)
    assert not passes(69)
    assert passes(60, {"passThreshold": 60})


def test_malformed_scale_uses_defaults():
    scale = {"passThreshold": "high", "grades": "A-F"}
    assert pass_threshold(scale) == 70
    assert grade_for_score(91, scale) == "A"


def test_scale_without_statuses_uses_threshold_bands():
    scale = {"passThreshold": 75, "grades": [{"grade": "Gold", "minScore": 75}, {"grade": "None", "minScore": 0}]}
    assert grade_for_score(80, scale) == "Gold"
    assert status_for_score(95, scale) == "APPROVED"
    assert status_for_score(80, scale) == "APPROVED_WITH_NOTES"
    assert status_for_score(60, scale) == "NEEDS_REVISION"
    assert status_for_score(20, scale) == "REJECTED"


def test_rubric_threshold_wins_over_shared_scale():
    rubric = {"gradingScale": {"passThreshold": 75}}
    assert pass_threshold({"passThreshold": 70}, rubric) == 75
    assert pass_threshold({"passThreshold": 65}, {"gradingScale": {}}) == 65
    assert pass_threshold(None, None) == 70


def test_failing_score_is_never_approved():
    scale = load_grading_scale()
    # Band C says APPROVED_WITH_NOTES, but 72 is below a pass mark of 75
    assert status_for_score(72, scale, threshold=75) == "NEEDS_REVISION"
    assert not passes(72, scale, threshold=75)
    assert status_for_score(80, scale, threshold=75) == "APPROVED_WITH_NOTES"


def test_non_dict_scale_uses_defaults():
    for scale in ([{"grade": "A", "minScore": 90}], "A-F", 7):
        assert pass_threshold(scale) == 70
        assert grade_for_score(91, scale) == "A"
        assert status_for_score(65, scale) == "NEEDS_REVISION"
    assert pass_threshold(None, [1, 2]) == 70


def test_non_finite_scale_numbers_are_ignored():
    scale = {"passThreshold": float("inf"), "grades": [{"grade": "X", "minScore": float("nan")}]}
    assert pass_threshold(scale) == 70
    assert grade_for_score(95, scale) == "A"

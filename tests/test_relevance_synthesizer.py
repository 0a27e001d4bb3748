import pytest

from hiring_models import (
    ExecutionFitScore,
    FounderConfidenceScore,
    FounderMetrics,
    RoleContext,
    TechnicalMetrics,
)
from hiring_synthesis.relevance_synthesizer import RelevanceSynthesizer, compute_relevance
from scoring_policy import FOUNDER_CONFIDENCE_WEIGHTS


def _ef(score):
    return ExecutionFitScore(score=score, metrics=TechnicalMetrics(S=0.5, D=0.5, W=0.5, R=0.0))


def _fc(score, context=RoleContext.STABLE_LONG_TERM):
    return FounderConfidenceScore(
        score=score,
        metrics=FounderMetrics(O=0.5, L=0.5, P=0.5, G=0.5),
        weights=FOUNDER_CONFIDENCE_WEIGHTS[context],
        role_context=context,
    )


def test_stable_long_term_reference_values():
    result = RelevanceSynthesizer(threshold=60).synthesize(
        _ef(68.5), _fc(61.0), 0.85, RoleContext.STABLE_LONG_TERM
    )

    assert result.score == 55.675
    assert result.alpha == 0.60
    assert result.beta == 0.40
    assert result.passed_threshold is False
    assert "below interview threshold (60)" in result.explanation


def test_threshold_is_inclusive():
    # (0.5 * 60 + 0.5 * 60) * 1.0 == 60
    result = RelevanceSynthesizer(threshold=60).synthesize(
        _ef(60.0), _fc(60.0, RoleContext.HIGH_PRESSURE_DELIVERY), 1.0, RoleContext.HIGH_PRESSURE_DELIVERY
    )
    assert result.score == 60.0
    assert result.passed_threshold is True
    assert "passes the interview-worthiness threshold" in result.explanation


@pytest.mark.parametrize(
    "context,expected",
    [
        (RoleContext.EARLY_STARTUP_EXECUTION, 0.55 * 80 + 0.45 * 40),
        (RoleContext.HIGH_OWNERSHIP_CRITICAL, 0.45 * 80 + 0.55 * 40),
        (RoleContext.EXPLORATORY_RND, 0.40 * 80 + 0.60 * 40),
    ],
)
def test_role_context_changes_the_blend(context, expected):
    assert compute_relevance(80.0, 40.0, 1.0, context) == pytest.approx(expected)


def test_criticality_mentioned_in_explanation():
    low = RelevanceSynthesizer(threshold=60).synthesize(
        _ef(70.0), _fc(70.0), 0.6, RoleContext.STABLE_LONG_TERM
    )
    high = RelevanceSynthesizer(threshold=60).synthesize(
        _ef(70.0), _fc(70.0), 0.95, RoleContext.STABLE_LONG_TERM
    )
    assert "support-level position" in low.explanation
    assert "senior/critical position" in high.explanation

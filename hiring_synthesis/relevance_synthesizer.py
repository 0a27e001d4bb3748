# relevance_synthesizer.py
"""
Relevance = (alpha * ExecutionFit + beta * FounderConfidence) * C

alpha and beta come from the role context row of RELEVANCE_WEIGHTS, C is the
criticality factor assigned to the JD. The result is clamped to [0, 100] and
compared against RELEVANCE_THRESHOLD.
"""

from typing import Optional

from hiring_models import ExecutionFitScore, FounderConfidenceScore, RelevanceScore, RoleContext
from scoring_policy import RELEVANCE_THRESHOLD, RELEVANCE_WEIGHTS, round_score


def compute_relevance(
    execution_fit: float,
    founder_confidence: float,
    criticality_factor: float,
    role_context: RoleContext,
) -> float:
    alpha, beta = RELEVANCE_WEIGHTS[role_context]
    return round_score((alpha * execution_fit + beta * founder_confidence) * criticality_factor)


class RelevanceSynthesizer:
    def __init__(self, threshold: Optional[float] = None) -> None:
        self.threshold = RELEVANCE_THRESHOLD if threshold is None else threshold

    def synthesize(
        self,
        execution_fit: ExecutionFitScore,
        founder_confidence: FounderConfidenceScore,
        criticality_factor: float,
        role_context: RoleContext,
    ) -> RelevanceScore:
        alpha, beta = RELEVANCE_WEIGHTS[role_context]
        score = compute_relevance(
            execution_fit.score,
            founder_confidence.score,
            criticality_factor,
            role_context,
        )
        passed = score >= self.threshold
        return RelevanceScore(
            score=score,
            execution_fit=execution_fit.score,
            founder_confidence=founder_confidence.score,
            criticality_factor=criticality_factor,
            alpha=alpha,
            beta=beta,
            passed_threshold=passed,
            explanation=self._explain(
                execution_fit.score,
                founder_confidence.score,
                score,
                alpha,
                beta,
                criticality_factor,
                role_context,
                passed,
            ),
        )

    def _explain(
        self,
        execution_fit: float,
        founder_confidence: float,
        relevance: float,
        alpha: float,
        beta: float,
        criticality_factor: float,
        role_context: RoleContext,
        passed: bool,
    ) -> str:
        parts = [
            f"For {role_context.label}, Execution Fit is weighted {alpha * 100:.0f}% "
            f"and Founder Confidence {beta * 100:.0f}%.",
            f"Execution Fit: {execution_fit:.1f}/100, Founder Confidence: {founder_confidence:.1f}/100.",
        ]
        if criticality_factor < 0.8:
            parts.append(
                f"Role criticality factor ({criticality_factor:.2f}) indicates a support-level position."
            )
        elif criticality_factor >= 0.9:
            parts.append(
                f"High role criticality ({criticality_factor:.2f}) reflects a senior/critical position."
            )
        parts.append(f"Final Relevance Score: {relevance:.1f}/100.")
        if passed:
            parts.append(f"Candidate passes the interview-worthiness threshold (>={self.threshold:g}).")
        else:
            parts.append(
                f"Candidate below interview threshold ({self.threshold:g}). "
                "Constructive feedback will be provided."
            )
        return " ".join(parts)

import json
from unittest.mock import MagicMock

import pytest

from fakes import (
    FOUNDER_RESPONSE,
    JD_RESPONSE,
    JD_TEXT,
    RESUME_RESPONSE,
    TECHNICAL_RESPONSE,
)
from hiring_agents.agent_runner import AgentRunner, AgentState
from hiring_agents.assignment_generation_agent import AssignmentGenerationAgent
from hiring_agents.candidate_feedback_agent import (
    CandidateFeedbackAgent,
    FeedbackInput,
    is_candidate_safe,
    score_to_qualitative,
)
from hiring_agents.founder_confidence_agent import FounderConfidenceAgent
from hiring_agents.jd_reality_agent import JDRealityAgent
from hiring_agents.resume_structuring_agent import (
    ResumeStructuringAgent,
    extract_contact_info,
)
from hiring_agents.technical_checking_agent import TechnicalCheckingAgent
from hiring_models import CandidateAssessmentInput, JDSpec, RoleContext
from pipeline_errors import UnparseableResponse
from scoring_policy import execution_fit_score, founder_confidence_score


def _runner(transform, response):
    client = MagicMock()
    client.complete.return_value = response if isinstance(response, str) else json.dumps(response)
    return AgentRunner(transform, client, correlation_id="test"), client


def _jd(**overrides):
    return JDSpec(**{**JD_RESPONSE, **overrides})


def _candidate(resume_document):
    runner, _ = _runner(ResumeStructuringAgent(), RESUME_RESPONSE)
    return runner.execute(resume_document).data


def test_jd_agent_builds_spec_and_uses_reasoning_as_explanation():
    runner, client = _runner(JDRealityAgent(), JD_RESPONSE)

    result = runner.execute(JD_TEXT)

    assert result.data.role_context is RoleContext.STABLE_LONG_TERM
    assert result.data.criticality_factor == 0.85
    assert result.data.non_negotiable_skills == ["Python", "SQL", "Airflow"]
    assert result.explanation == JD_RESPONSE["reasoning"]
    assert runner.state is AgentState.DONE
    assert client.complete.call_args.kwargs["json_mode"] is True
    assert JD_TEXT in client.complete.call_args.args[1]


def test_jd_agent_clamps_criticality_and_defaults_unknown_context():
    runner, _ = _runner(
        JDRealityAgent(),
        {**JD_RESPONSE, "criticality_factor": 1.7, "role_context": "Moonshot", "pressure_level": "extreme"},
    )

    spec = runner.execute(JD_TEXT).data

    assert spec.criticality_factor == 1.0
    assert spec.role_context is RoleContext.STABLE_LONG_TERM
    assert spec.pressure_level == "Medium"


def test_jd_agent_missing_criticality_defaults():
    response = {k: v for k, v in JD_RESPONSE.items() if k != "criticality_factor"}
    runner, _ = _runner(JDRealityAgent(), response)
    assert runner.execute(JD_TEXT).data.criticality_factor == 0.8


def test_resume_agent_overrides_contact_details_from_text(resume_document):
    profile = _candidate(resume_document)

    assert profile.name == "Asha Rao"
    assert profile.email == "asha.rao@example.com"
    assert profile.phone is not None
    assert profile.resume_hash == "hash-asha"
    assert profile.resume_file_link == resume_document.file_link
    assert [s.name for s in profile.skills] == ["Python", "SQL", "Airflow"]
    assert profile.skills[2].years_of_experience is None


def test_resume_agent_falls_back_on_garbage(resume_document):
    runner, _ = _runner(ResumeStructuringAgent(), "Sorry, I could not read that resume.")

    result = runner.execute(resume_document)

    assert result.used_fallback is True
    assert result.data.name == "Unable to Parse"
    assert result.data.email == "asha.rao@example.com"
    assert result.data.work_experience == []


def test_extract_contact_info_without_matches():
    assert extract_contact_info("no contact details here") == (None, None)


def test_technical_agent_scores_and_clamps(resume_document):
    candidate = _candidate(resume_document)
    payload = CandidateAssessmentInput(candidate=candidate, jd_spec=_jd())
    runner, _ = _runner(TechnicalCheckingAgent(), {**TECHNICAL_RESPONSE, "S": 1.4, "R": -0.3})

    result = runner.execute(payload)

    assert result.data.metrics.S == 1.0
    assert result.data.metrics.R == 0.0
    assert result.data.score == execution_fit_score(1.0, 0.7, 0.6, 0.0)
    assert result.confidence == 0.85
    assert "Execution Fit Score" in result.data.explanation


def test_technical_agent_low_confidence_with_thin_justifications(resume_document):
    payload = CandidateAssessmentInput(candidate=_candidate(resume_document), jd_spec=_jd())
    runner, _ = _runner(TechnicalCheckingAgent(), {"S": 0.5, "D": 0.5, "W": 0.5, "R": 0.0})

    result = runner.execute(payload)

    assert result.confidence == 0.65


def test_technical_agent_without_fallback_raises(resume_document):
    payload = CandidateAssessmentInput(candidate=_candidate(resume_document), jd_spec=_jd())
    runner, _ = _runner(TechnicalCheckingAgent(), "not json")

    with pytest.raises(UnparseableResponse):
        runner.execute(payload)
    assert runner.state is AgentState.FAILED


def test_founder_agent_uses_role_context_weights(resume_document):
    payload = CandidateAssessmentInput(candidate=_candidate(resume_document), jd_spec=_jd())
    runner, _ = _runner(FounderConfidenceAgent(), FOUNDER_RESPONSE)

    result = runner.execute(payload)

    assert result.data.score == 67.0
    assert result.data.role_context is RoleContext.STABLE_LONG_TERM
    assert result.data.weights.wL == 0.40
    assert result.confidence == 0.8
    assert "Longevity is weighted highest" in result.data.explanation


def test_founder_agent_clamps_metrics(resume_document):
    payload = CandidateAssessmentInput(candidate=_candidate(resume_document), jd_spec=_jd())
    runner, _ = _runner(FounderConfidenceAgent(), {**FOUNDER_RESPONSE, "O": 1.7, "G": -0.2})

    result = runner.execute(payload)

    metrics = result.data.metrics
    assert (metrics.O, metrics.L, metrics.P, metrics.G) == (1.0, 0.9, 0.4, 0.0)
    assert result.data.score == founder_confidence_score(result.data.weights, 1.0, 0.9, 0.4, 0.0)
    assert result.data.score == 62.0


def test_assignment_agent_clamps_timebox():
    runner, _ = _runner(AssignmentGenerationAgent(), {"title": "Build it", "timebox_hours": 12})
    assignment = runner.execute(_jd()).data
    assert assignment.timebox_hours == 6
    assert assignment.title == "Build it"


def test_assignment_agent_defaults_missing_fields():
    runner, _ = _runner(AssignmentGenerationAgent(), {})
    assignment = runner.execute(_jd()).data
    assert assignment.title == "Technical Assessment"
    assert assignment.timebox_hours == 4


def _feedback_input(resume_document, passed=True):
    candidate = _candidate(resume_document)
    jd = _jd()
    assessment = CandidateAssessmentInput(candidate=candidate, jd_spec=jd)
    technical, _ = _runner(TechnicalCheckingAgent(), TECHNICAL_RESPONSE)
    founder, _ = _runner(FounderConfidenceAgent(), FOUNDER_RESPONSE)
    return FeedbackInput(
        candidate=candidate,
        jd_spec=jd,
        execution_fit=technical.execute(assessment).data,
        founder_confidence=founder.execute(assessment).data,
        passed_threshold=passed,
    )


def test_feedback_agent_filters_scores_and_rejection_language(resume_document):
    runner, client = _runner(
        CandidateFeedbackAgent(),
        {
            "strengths": ["Solid Airflow experience", "Your score was 72/100", "85% skill match"],
            "gaps": ["We reject profiles like this", "Limited streaming experience"],
            "recommendations": ["Other candidates had more depth", "Build a Kafka side project"],
            "growth_trajectory_note": "You did not fail, keep going",
        },
    )

    feedback = runner.execute(_feedback_input(resume_document)).data

    assert feedback.strengths == ["Solid Airflow experience"]
    assert feedback.gaps == ["Limited streaming experience"]
    assert feedback.recommendations == ["Build a Kafka side project"]
    assert feedback.growth_trajectory_note is None
    prompt = client.complete.call_args.args[1]
    assert "0.8" not in prompt
    assert "Skill Match: Strong" in prompt


def test_feedback_prompt_mentions_outcome(resume_document):
    runner, client = _runner(CandidateFeedbackAgent(), {"strengths": []})
    runner.execute(_feedback_input(resume_document, passed=False))
    assert "did not meet the bar" in client.complete.call_args.args[1]


@pytest.mark.parametrize(
    "value,label",
    [(0.9, "Strong"), (0.6, "Good"), (0.4, "Moderate"), (0.2, "Limited"), (0.1, "Minimal")],
)
def test_score_to_qualitative(value, label):
    assert score_to_qualitative(value) == label


def test_is_candidate_safe():
    assert is_candidate_safe("Strong ownership of data models")
    assert not is_candidate_safe("Scored 7/10 on depth")
    assert not is_candidate_safe("You were not selected this time")

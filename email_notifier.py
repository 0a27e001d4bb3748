import logging
import smtplib
from email.message import EmailMessage
from html import escape
from typing import Iterable, List, Optional

from app_config import EMAIL_FROM, REVIEWER_EMAIL, SMTP_HOST, SMTP_PASS, SMTP_PORT, SMTP_USER
from campaigns import Campaign
from hiring_models import CandidateFeedback, InternalVerdict

logger = logging.getLogger(__name__)

RECOMMENDATION_COLORS = {
    "Strong Yes": "#2e7d32",
    "Yes": "#388e3c",
    "Maybe": "#f57c00",
    "Not Now": "#c62828",
}


def relevance_color(score: float) -> str:
    if score >= 70:
        return "#2e7d32"
    if score >= 50:
        return "#f57c00"
    return "#c62828"


def _html_list(items: Iterable[str]) -> str:
    return "<ul>" + "".join(f"<li>{escape(item)}</li>" for item in items) + "</ul>"


def first_name(name: str) -> str:
    parts = (name or "").split()
    return parts[0] if parts else "there"


def feedback_html(feedback: CandidateFeedback) -> str:
    html = '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
    if feedback.strengths:
        html += '<h3 style="color: #2e7d32;">What Stood Out in Your Profile</h3>'
        html += _html_list(feedback.strengths)
    if feedback.gaps:
        html += '<h3 style="color: #f57c00;">Areas That Were Unclear or Missing</h3>'
        html += _html_list(feedback.gaps)
    if feedback.recommendations:
        html += '<h3 style="color: #1976d2;">Recommendations for Strengthening Your Profile</h3>'
        html += _html_list(feedback.recommendations)
    if feedback.growth_trajectory_note:
        html += (
            '<p style="margin-top: 20px; padding: 15px; background-color: #e3f2fd; border-radius: 8px;">'
            f"<strong>Growth Perspective:</strong> {escape(feedback.growth_trajectory_note)}</p>"
        )
    return html + "</div>"


def candidate_email_html(name: str, feedback: CandidateFeedback, next_steps: List[str]) -> str:
    reviewed = "application" if feedback.stage == "resume" else "assignment submission"
    steps = ""
    if next_steps:
        steps = '<h3 style="color: #6a1b9a;">Next Steps</h3>' + _html_list(next_steps)
    return (
        '<div style="max-width: 600px; margin: 0 auto; padding: 20px;">'
        f'<h2 style="color: #333;">Hi {escape(first_name(name))},</h2>'
        f"<p>Thank you for your interest in this role. We've carefully reviewed your {reviewed} "
        "and wanted to share some constructive feedback.</p>"
        f"{feedback_html(feedback)}{steps}"
        '<p style="margin-top: 30px; color: #666;">Best regards,<br>The Hiring Team</p>'
        "</div>"
    )


def reviewer_email_html(verdict: InternalVerdict, campaign: Optional[Campaign] = None) -> str:
    def score_row(label: str, score: float, style: str = "") -> str:
        return (
            f'<tr><td style="padding: 10px; border: 1px solid #ddd;"><strong>{label}</strong></td>'
            f'<td style="padding: 10px; border: 1px solid #ddd;{style}">{score:.1f}/100</td></tr>'
        )

    relevance = verdict.relevance.score
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 700px; margin: 0 auto; padding: 20px;">'
        '<h2 style="color: #333;">New Candidate Processed</h2>'
    )
    if campaign is not None:
        html += f"<p>Campaign: <strong>{escape(campaign.name)}</strong></p>"
    html += (
        '<div style="background: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        f'<h3 style="margin-top: 0;">{escape(verdict.candidate_name)}</h3>'
        f"<p>Email: {escape(verdict.email or 'N/A')}<br>Phone: {escape(verdict.phone or 'N/A')}</p>"
        f'<p><a href="{escape(verdict.resume_file_link)}" style="color: #1976d2;">View Resume</a></p>'
        "</div>"
        "<h3>Scores</h3>"
        '<table style="width: 100%; border-collapse: collapse; margin: 10px 0;">'
        + score_row("Execution Fit", verdict.execution_fit.score)
        + score_row("Founder Confidence", verdict.founder_confidence.score)
        + score_row(
            "Relevance Score",
            relevance,
            f" color: {relevance_color(relevance)}; font-weight: bold;",
        )
        + "</table>"
        f"<p>Role context: {escape(verdict.role_context.label)}</p>"
        "<h3>Recommendation: "
        f'<span style="color: {RECOMMENDATION_COLORS.get(verdict.recommendation, "#333")}">'
        f"{escape(verdict.recommendation)}</span></h3>"
    )
    if verdict.interview_focus_areas:
        html += "<h4>Interview Focus Areas</h4>" + _html_list(verdict.interview_focus_areas)
    if verdict.risk_notes:
        html += '<h4 style="color: #c62828;">Risk Notes</h4>' + _html_list(verdict.risk_notes)
    if verdict.assignment:
        html += (
            "<h4>Assignment Assigned</h4>"
            f"<p><strong>{escape(verdict.assignment.title)}</strong></p>"
            f"<p>{escape(verdict.assignment.objective)}</p>"
        )
    html += (
        '<p style="margin-top: 30px; color: #666; font-size: 12px;">'
        f"Processed at: {verdict.timestamp.isoformat()}</p></div>"
    )
    return html


def reviewer_subject(verdict: InternalVerdict) -> str:
    return (
        f"[{verdict.recommendation}] New Candidate: {verdict.candidate_name} "
        f"({verdict.relevance.score:.0f}/100)"
    )


class EmailNotifier:
    """SMTP notifier: HTML summary to the reviewer, score-free feedback to candidates."""

    def __init__(
        self,
        *,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        reviewer_email: Optional[str] = None,
        smtp_factory=None,
    ) -> None:
        self.host = host or SMTP_HOST
        self.port = port or SMTP_PORT
        self.user = user if user is not None else SMTP_USER
        self.password = password if password is not None else SMTP_PASS
        self.sender = sender or EMAIL_FROM or self.user
        self.reviewer_email = reviewer_email if reviewer_email is not None else REVIEWER_EMAIL
        # Port 465 is implicit TLS; everything else upgrades with STARTTLS.
        self.use_ssl = self.port == 465
        self._smtp_factory = smtp_factory or (smtplib.SMTP_SSL if self.use_ssl else smtplib.SMTP)

    def _connect(self):
        server = self._smtp_factory(self.host, self.port, timeout=30)
        try:
            if not self.use_ssl:
                server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
        except Exception:
            server.close()
            raise
        return server

    def _send(self, to: str, subject: str, html: str) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")

        server = self._connect()
        try:
            server.send_message(message)
        finally:
            server.quit()

    def notify_reviewer(self, verdict: InternalVerdict, campaign: Optional[Campaign] = None) -> None:
        if not self.reviewer_email:
            logger.warning("reviewer_email_missing", extra={"candidate_name": verdict.candidate_name})
            return
        self._send(self.reviewer_email, reviewer_subject(verdict), reviewer_email_html(verdict, campaign))
        logger.info("reviewer_notified", extra={"candidate_name": verdict.candidate_name})

    def notify_candidate(
        self,
        email: str,
        name: str,
        feedback: CandidateFeedback,
        next_steps: List[str],
    ) -> None:
        if not email:
            logger.warning("candidate_email_missing", extra={"candidate_name": name})
            return
        title = (
            "Application Review Feedback"
            if feedback.stage == "resume"
            else "Assignment Submission Feedback"
        )
        self._send(
            email,
            f"{title} - Thank you for your application",
            candidate_email_html(name, feedback, next_steps),
        )
        logger.info("candidate_feedback_sent", extra={"candidate_name": name})

    def verify(self) -> bool:
        try:
            server = self._connect()
            try:
                server.noop()
            finally:
                server.quit()
            return True
        except Exception as exc:  # pragma: no cover - logging path
            logger.error("smtp_verify_failed", extra={"error": str(exc)})
            return False

"""
Slack Block Kit builders for campaign poll notifications.
Groups the candidates scored in one poll tick by recommendation.
"""

from typing import Any, Dict, List

MAX_CANDIDATES_PER_GROUP = 15
ERROR_DISPLAY_LIMIT = 3

RECOMMENDATION_GROUPS = [
    ("Strong Yes", "🟢"),
    ("Yes", "🟢"),
    ("Maybe", "🟡"),
    ("Not Now", "🔴"),
]


def build_poll_summary_blocks(summary: Any) -> List[Dict[str, Any]]:
    """
    Build complete Slack Block Kit payload for a campaign poll summary.

    Args:
        summary: CampaignBatchSummary

    Returns:
        List of Slack blocks
    """
    blocks = []
    blocks.extend(build_status_header(summary))
    blocks.append({"type": "divider"})
    blocks.extend(build_summary_stats(summary))

    error_blocks = build_error_details(summary)
    if error_blocks:
        blocks.append({"type": "divider"})
        blocks.extend(error_blocks)

    candidates = getattr(summary, "candidates", [])
    if candidates:
        blocks.append({"type": "divider"})
        blocks.extend(build_candidate_groups(candidates))

    blocks.extend(build_footer())
    return blocks


def build_status_header(summary: Any) -> List[Dict[str, Any]]:
    processed = getattr(summary, "processed", 0)
    emoji = "🔴" if getattr(summary, "failed", 0) else "🟢"
    return [{
        "type": "header",
        "text": {
            "type": "plain_text",
            "text": f"{emoji} Resume Poll Summary ({processed} new candidates)",
            "emoji": True,
        },
    }]


def build_summary_stats(summary: Any) -> List[Dict[str, Any]]:
    fields = [
        {"type": "mrkdwn", "text": f"*Campaigns Polled:*\n{getattr(summary, 'campaigns_polled', 0)}"},
        {"type": "mrkdwn", "text": f"*Processed:*\n{getattr(summary, 'processed', 0)}"},
        {"type": "mrkdwn", "text": f"*Passed Threshold:*\n{getattr(summary, 'passed_threshold', 0)}"},
    ]

    skipped = getattr(summary, "skipped_duplicates", 0)
    if skipped > 0:
        fields.append({"type": "mrkdwn", "text": f"*Skipped (Already Processed):*\n{skipped}"})

    failed = getattr(summary, "failed", 0)
    if failed > 0:
        fields.append({"type": "mrkdwn", "text": f"*Failed:*\n{failed}"})

    errors = getattr(summary, "errors", None) or []
    if errors:
        fields.append({"type": "mrkdwn", "text": f"*Errors:*\n{len(errors)}"})

    return [{"type": "section", "fields": fields}]


def build_error_details(summary: Any, limit: int = ERROR_DISPLAY_LIMIT) -> List[Dict[str, Any]]:
    """Render a concise list of poll errors for Slack."""
    entries = getattr(summary, "errors", None) or []
    if not entries:
        return []

    lines: List[str] = [f"*Errors detected (top {limit})*"]
    for error in entries[:limit]:
        subject = getattr(error, "resume_name", None) or "Campaign"
        campaign_id = getattr(error, "campaign_id", None) or "unknown campaign"
        lines.append(f"• *{subject}* — {campaign_id}")
        lines.append(f"   *Error:* `{getattr(error, 'error_code', 'error')}`")
        lines.append(f"   {getattr(error, 'error_message', 'See logs for full detail.')}")

    remaining = len(entries) - limit
    if remaining > 0:
        lines.append(f"…and {remaining} more errors. See logs.")

    return [{"type": "section", "text": {"type": "mrkdwn", "text": "\n".join(lines)}}]


def build_candidate_groups(candidates: List[Any]) -> List[Dict[str, Any]]:
    groups: Dict[str, List[Any]] = {}
    for candidate in candidates:
        groups.setdefault(getattr(candidate, "recommendation", None) or "Not Now", []).append(candidate)

    blocks = []
    for recommendation, emoji in RECOMMENDATION_GROUPS:
        if groups.get(recommendation):
            blocks.extend(build_candidate_group_section(recommendation, emoji, groups[recommendation]))
    return blocks


def build_candidate_group_section(title: str, emoji: str, candidates: List[Any]) -> List[Dict[str, Any]]:
    count = len(candidates)
    blocks = [{
        "type": "section",
        "text": {"type": "mrkdwn", "text": f"{emoji} *{title}* ({count})"},
    }]

    for candidate in candidates[:MAX_CANDIDATES_PER_GROUP]:
        blocks.append(build_candidate_row(candidate))

    if count > MAX_CANDIDATES_PER_GROUP:
        blocks.append({
            "type": "context",
            "elements": [{
                "type": "mrkdwn",
                "text": f"_...and {count - MAX_CANDIDATES_PER_GROUP} more candidates_",
            }],
        })
    return blocks


def build_candidate_row(candidate: Any) -> Dict[str, Any]:
    name = getattr(candidate, "candidate_name", None) or "Unknown"
    parts = [f"*{name}*"]

    score = getattr(candidate, "relevance_score", None)
    if score is not None:
        parts.append(f"— {score:.1f}/100")

    link = getattr(candidate, "resume_link", None)
    if link:
        parts.append(f"<{link}|📄 Resume>")

    return {"type": "section", "text": {"type": "mrkdwn", "text": " ".join(parts)}}


def build_footer() -> List[Dict[str, Any]]:
    return [{
        "type": "context",
        "elements": [{"type": "mrkdwn", "text": "Generated by the hiring pipeline"}],
    }]

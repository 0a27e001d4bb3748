# app_config.py
"""
Runtime configuration for the hiring pipeline.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be numeric, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


# Completion provider
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai").lower()
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o")
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/v1")
LLM_TIMEOUT_SECONDS = _env_float("LLM_TIMEOUT_SECONDS", 120.0)
LLM_MAX_ATTEMPTS = _env_int("LLM_MAX_ATTEMPTS", 8)
LLM_RETRY_BASE_SECONDS = _env_float("LLM_RETRY_BASE_SECONDS", 30.0)
LLM_RETRY_STEP_SECONDS = _env_float("LLM_RETRY_STEP_SECONDS", 15.0)
LLM_RETRY_JITTER_SECONDS = _env_float("LLM_RETRY_JITTER_SECONDS", 5.0)

# Scoring
RELEVANCE_THRESHOLD = _env_float("RELEVANCE_THRESHOLD", 60.0)

# Polling and storage
DRIVE_POLL_INTERVAL_SECONDS = _env_int("DRIVE_POLL_INTERVAL_SECONDS", 30)
ENABLE_POLL_SCHEDULER = _env_flag("ENABLE_POLL_SCHEDULER")
PROCESSED_INDEX_PATH = os.getenv("PROCESSED_INDEX_PATH", ".processed_hashes.json")
GOOGLE_SHEETS_OUTPUT_ID = os.getenv("GOOGLE_SHEETS_OUTPUT_ID")

# Email
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = _env_int("SMTP_PORT", 587)
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASS = os.getenv("SMTP_PASS")
EMAIL_FROM = os.getenv("EMAIL_FROM") or SMTP_USER
REVIEWER_EMAIL = os.getenv("REVIEWER_EMAIL")

# Slack
SLACK_REVIEWER_BOT_TOKEN = os.getenv("SLACK_REVIEWER_BOT_TOKEN")
SLACK_REVIEWER_CHANNEL_ID = os.getenv("SLACK_REVIEWER_CHANNEL_ID")

# Validation
VALID_PROVIDERS = {"openai", "gemini", "claude", "ollama"}
if LLM_PROVIDER not in VALID_PROVIDERS:
    raise ValueError(f"LLM_PROVIDER must be one of {VALID_PROVIDERS}, got {LLM_PROVIDER}")

if not 0 <= RELEVANCE_THRESHOLD <= 100:
    raise ValueError(f"RELEVANCE_THRESHOLD must be within [0, 100], got {RELEVANCE_THRESHOLD}")

if LLM_MAX_ATTEMPTS < 1:
    raise ValueError(f"LLM_MAX_ATTEMPTS must be at least 1, got {LLM_MAX_ATTEMPTS}")


def is_email_configured() -> bool:
    """Check if SMTP credentials are present."""
    return bool(SMTP_USER and SMTP_PASS)


def is_sheet_output_configured() -> bool:
    """Check if a results spreadsheet is configured."""
    return bool(GOOGLE_SHEETS_OUTPUT_ID)

"""Service account credentials shared by the Drive and Sheets adapters."""

import base64
import binascii
import json
import logging
import os
from typing import Any, Dict, Optional, Sequence, Tuple

from google.oauth2 import service_account

try:  # pragma: no cover - optional dependency
    from google.cloud import secretmanager
except ImportError:  # pragma: no cover
    secretmanager = None


logger = logging.getLogger(__name__)
_secret_client = None

SECRET_PREFIX = "gcp-secret://"
CREDENTIAL_ENV_VARS = (
    "GOOGLE_APPLICATION_CREDENTIALS",
    "HIRING_SA_JSON_CONTENT",
    "HIRING_SA_JSON_BASE64",
    "HIRING_SA_JSON",
)

Credentials = Tuple[service_account.Credentials, Optional[str]]


def resolve_secret_reference(reference: str) -> Optional[str]:
    """Read the latest version of a ``gcp-secret://<name>`` reference."""
    if secretmanager is None:
        logger.warning("secret_manager_not_installed", extra={"secret": reference})
        return None

    project_id = os.getenv("GCP_SECRET_PROJECT") or os.getenv("GOOGLE_CLOUD_PROJECT")
    if not project_id:
        logger.warning("secret_project_missing", extra={"secret": reference})
        return None

    global _secret_client
    if _secret_client is None:
        _secret_client = secretmanager.SecretManagerServiceClient()

    version = _secret_client.secret_version_path(
        project_id, reference[len(SECRET_PREFIX):], "latest"
    )
    try:
        response = _secret_client.access_secret_version(name=version)
    except Exception as exc:  # pragma: no cover - logging path
        logger.warning("secret_access_failed", extra={"secret": reference, "error": str(exc)})
        return None
    return response.payload.data.decode("utf-8")


def _from_info(info: Dict[str, Any], scopes: Sequence[str]) -> Credentials:
    creds = service_account.Credentials.from_service_account_info(info, scopes=scopes)
    return creds, info.get("project_id")


def _from_file(path: str, scopes: Sequence[str]) -> Credentials:
    creds = service_account.Credentials.from_service_account_file(path, scopes=scopes)
    return creds, getattr(creds, "project_id", None)


def _from_path_or_json(value: str, scopes: Sequence[str], source: str) -> Optional[Credentials]:
    if os.path.exists(value):
        return _from_file(value, scopes)
    try:
        info = json.loads(value)
    except json.JSONDecodeError:
        logger.warning("service_account_value_invalid", extra={"source": source})
        return None
    return _from_info(info, scopes)


def decode_base64_service_account(encoded: str) -> Optional[Dict[str, Any]]:
    try:
        return json.loads(base64.b64decode(encoded).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("service_account_base64_invalid")
        return None


def load_service_account_credentials(scopes: Sequence[str]) -> Optional[Credentials]:
    """Return ``(credentials, project_id)`` from the first configured source.

    Sources are tried in ``CREDENTIAL_ENV_VARS`` order: a key file path, inline
    JSON (or a ``gcp-secret://`` reference), base64 JSON, then a path or JSON.
    """
    key_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if key_path:
        if os.path.exists(key_path):
            return _from_file(key_path, scopes)
        logger.warning("credentials_path_missing", extra={"path": key_path})

    inline = os.getenv("HIRING_SA_JSON_CONTENT")
    if inline and inline.startswith(SECRET_PREFIX):
        inline = resolve_secret_reference(inline)
    if inline:
        creds = _from_path_or_json(inline, scopes, "HIRING_SA_JSON_CONTENT")
        if creds:
            return creds

    encoded = os.getenv("HIRING_SA_JSON_BASE64")
    if encoded:
        info = decode_base64_service_account(encoded)
        if info:
            return _from_info(info, scopes)

    raw = os.getenv("HIRING_SA_JSON")
    if raw:
        creds = _from_path_or_json(raw, scopes, "HIRING_SA_JSON")
        if creds:
            return creds

    logger.warning("service_account_credentials_missing", extra={"checked": CREDENTIAL_ENV_VARS})
    return None

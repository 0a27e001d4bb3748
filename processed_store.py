from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional

from app_config import PROCESSED_INDEX_PATH

logger = logging.getLogger(__name__)


class ProcessedStore:
    """Flat JSON index of resume content hashes that finished the pipeline."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or PROCESSED_INDEX_PATH
        self._lock = Lock()
        self._entries: Dict[str, Dict[str, Any]] = self._load()

    # ------------------------------------------------------------------
    def is_processed(self, identity: str) -> bool:
        with self._lock:
            return identity in self._entries

    def mark_processed(self, identity: str, **metadata: Any) -> None:
        record = {k: v for k, v in metadata.items() if v is not None}
        record["processed_at"] = datetime.now(timezone.utc).isoformat()
        with self._lock:
            self._entries[identity] = record
            self._flush()

    def get(self, identity: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(identity)
            return dict(entry) if entry else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "processed_index_unreadable",
                extra={"path": self.path, "error": str(exc)},
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("processed_index_malformed", extra={"path": self.path})
            return {}
        return data

    def _flush(self) -> None:
        # Readers only ever see a complete index file.
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(self._entries, fh, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)

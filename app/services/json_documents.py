"""
Small JSON documents kept on disk and edited by hand or through the admin API.

Reads go through a cache keyed by the SHA-256 of the file contents, so an
edit is picked up on the next read without relying on file modification
times, and an unchanged file is parsed only once.
"""

import hashlib
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

MISSING = object()


class JsonDocumentCache:
    """Parsed JSON documents keyed by path, invalidated by content hash."""

    def __init__(self):
        self._entries: Dict[str, Tuple[str, Any]] = {}
        self._lock = threading.Lock()

    def load(self, path: Path) -> Any:
        """
        Return the parsed document at path.

        Returns MISSING when the file does not exist or is not valid JSON;
        a malformed file is logged once per distinct content.
        """
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return MISSING

        digest = hashlib.sha256(raw).hexdigest()
        key = str(path)

        with self._lock:
            cached = self._entries.get(key)
            if cached and cached[0] == digest:
                return cached[1]

        try:
            value = json.loads(raw.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring malformed JSON document {path}: {str(e)}")
            value = MISSING

        with self._lock:
            self._entries[key] = (digest, value)
        return value

    def invalidate(self, path: Optional[Path] = None):
        with self._lock:
            if path is None:
                self._entries.clear()
            else:
                self._entries.pop(str(path), None)


def write_document(path: Path, value: Any, cache: Optional[JsonDocumentCache] = None):
    """Write value as pretty JSON, replacing the file atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(value, indent=2), encoding="utf-8")
    tmp.replace(path)
    if cache is not None:
        cache.invalidate(path)


document_cache = JsonDocumentCache()

"""Append-only JSONL trail of gate decisions.

Each record carries a UTC ISO-8601 timestamp, a session identifier, the
operation that was gated and the reporter's view of the decision.

Writes are serialised with a threading.Lock so the log can be shared by
gates running on several threads.

Example
-------
>>> from pathlib import Path
>>> log = DecisionAuditLog(Path("/tmp/authz.jsonl"))
>>> log.log({"event": "authorization_denied", "user_id": "u1"})
>>> len(log.denials())
1
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

DENIED_EVENT = "authorization_denied"
GRANTED_EVENT = "authorization_granted"


class DecisionAuditLog:
    """Append-only JSONL decision log.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` file. Parent directories are created on
        first write.
    session_id:
        Identifier stamped on every record. A random UUID by default.
    """

    def __init__(self, log_path: Path, session_id: str | None = None) -> None:
        self._log_path = Path(log_path)
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def log(self, entry: dict[str, object]) -> None:
        """Append *entry*, stamped with ``timestamp`` and ``session_id``."""
        record: dict[str, object] = {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "session_id": self._session_id,
            **entry,
        }
        self._write(record)

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return all records in write order; empty if the file is missing."""
        return list(self.iter_entries())

    def denials(self) -> list[dict[str, object]]:
        return [r for r in self.iter_entries() if r.get("event") == DENIED_EVENT]

    def count(self) -> int:
        return sum(1 for _ in self.iter_entries())

    def iter_entries(self) -> Iterator[dict[str, object]]:
        """Yield parsed records from the log file one at a time.

        The file is read under the lock and parsed after it is released, so
        callers may log new entries while iterating. Those entries are not
        part of the current iteration.
        """
        if not self._log_path.exists():
            return
        with self._lock:
            with self._log_path.open("r", encoding="utf-8") as fh:
                lines = fh.readlines()
        for line_no, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping malformed audit line %d in %s", line_no, self._log_path)

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def session_id(self) -> str:
        return self._session_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, record: dict[str, object]) -> None:
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, default=str) + "\n")

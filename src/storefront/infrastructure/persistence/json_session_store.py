"""JSON-file-backed implementation of SessionLookup.

The sign-in flow (not part of this package) writes
``{"user_id": 7, "token": "..."}``; a missing or unreadable file means
nobody is signed in.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from storefront.domain.gateway.session_lookup import SessionLookup
from storefront.domain.model.session import Session

logger = structlog.get_logger(__name__)


class JsonSessionStore(SessionLookup):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- SessionLookup interface ----------------------------------------------

    def current(self) -> Session | None:
        if not self._file_path.exists():
            return None
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            return Session(user_id=int(raw["user_id"]), token=str(raw["token"]))
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("session_file_unreadable", path=str(self._file_path), error=str(exc))
            return None

    # --- Writes (used by sign-in / sign-out hooks) ----------------------------

    def save(self, session: Session) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps({"user_id": session.user_id, "token": session.token}, indent=2) + "\n",
            encoding="utf-8",
        )

    def clear(self) -> None:
        self._file_path.unlink(missing_ok=True)

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .models import SessionData

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get_token(self) -> str | None: ...

    def set_token(self, token: str) -> None: ...

    def clear(self) -> None: ...


@dataclass
class MemorySessionStore:
    token: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get_token(self) -> str | None:
        with self._lock:
            return self.token

    def set_token(self, token: str) -> None:
        with self._lock:
            self.token = token

    def clear(self) -> None:
        with self._lock:
            self.token = None


@dataclass
class FileSessionStore:
    app_name: str = "scratchoff"
    filename: str = "session.json"
    base_dir: Path | None = None

    def _path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, "Scratchoff"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def get_token(self) -> str | None:
        session = self.load()
        return session.access_token if session else None

    def set_token(self, token: str) -> None:
        self.save(SessionData(access_token=token, saved_at=datetime.now(timezone.utc)))

    def save(self, session: SessionData) -> None:
        path = self._path()
        path.write_text(json.dumps(session.model_dump(mode="json"), indent=2), encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            logger.debug("session_chmod_unsupported", extra={"path": str(path)})

    def load(self) -> SessionData | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return SessionData.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, PydanticValidationError) as exc:
            logger.warning("session_file_corrupt", extra={"path": str(path), "error_type": type(exc).__name__})
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        path.unlink(missing_ok=True)

"""Persistence of in-progress test sessions so they can be resumed."""

from __future__ import annotations

import json
import os
from pathlib import Path
from threading import Lock
from typing import Any, Protocol
from urllib.parse import quote

from cbt_app.core.models import ProgressSnapshot


class ProgressStoreError(RuntimeError):
    """Raised when progress cannot be written, read or cleared."""


class ProgressStore(Protocol):
    def save(self, session_id: str, snapshot: ProgressSnapshot) -> None: ...

    def load(self, session_id: str) -> ProgressSnapshot | None: ...

    def clear(self, session_id: str) -> None: ...


class InMemoryProgressStore:
    """Keeps snapshots in their serialized form, keyed by session id."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = Lock()

    def save(self, session_id: str, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            self._records[session_id] = snapshot.to_dict()

    def load(self, session_id: str) -> ProgressSnapshot | None:
        with self._lock:
            record = self._records.get(session_id)
        if record is None:
            return None
        return ProgressSnapshot.from_dict(record)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._records.pop(session_id, None)

    def has_progress(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._records


class JsonFileProgressStore:
    """Stores one ``progress_<session>.json`` file per session under ``base_path``."""

    def __init__(self, base_path: Path | str) -> None:
        self.base_path = Path(base_path)
        self._lock = Lock()

    def path_for(self, session_id: str) -> Path:
        # Percent-encoding keeps distinct session ids on distinct files.
        safe_id = quote(session_id, safe="")
        return self.base_path / f"progress_{safe_id}.json"

    def save(self, session_id: str, snapshot: ProgressSnapshot) -> None:
        file_path = self.path_for(session_id)
        document = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
        with self._lock:
            try:
                file_path.parent.mkdir(parents=True, exist_ok=True)
                temp_path = file_path.with_suffix(".json.tmp")
                temp_path.write_text(document, encoding="utf-8")
                os.replace(temp_path, file_path)
            except OSError as exc:
                raise ProgressStoreError(f"Could not save progress to {file_path}: {exc}") from exc

    def load(self, session_id: str) -> ProgressSnapshot | None:
        file_path = self.path_for(session_id)
        with self._lock:
            if not file_path.exists():
                return None
            try:
                data = json.loads(file_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise ProgressStoreError(f"Could not read progress from {file_path}: {exc}") from exc
        try:
            return ProgressSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise ProgressStoreError(f"Malformed progress file {file_path}: {exc}") from exc

    def clear(self, session_id: str) -> None:
        file_path = self.path_for(session_id)
        with self._lock:
            try:
                file_path.unlink(missing_ok=True)
            except OSError as exc:
                raise ProgressStoreError(f"Could not clear progress at {file_path}: {exc}") from exc

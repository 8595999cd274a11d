"""Shared storage helpers for the catalog services.

This module centralises the JSON-backed persistence helpers used by the
reference API, the seed script and the client's local-storage emulation.
Keeping them in one place means atomic writes and rotating backups behave the
same everywhere.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence

logger = logging.getLogger(__name__)

_EMPTY = object()


class StoreError(RuntimeError):
    """Raised when a persistence operation fails."""


class _BackedUpFile:
    """Path bookkeeping shared by the JSON stores.

    Writes go through a ``.tmp`` file and ``os.replace``. Before each write the
    current file is shifted into ``.bak1`` (and ``.bak1`` into ``.bak2`` and so
    on) so that a reader can fall back to the newest readable copy.
    """

    def __init__(self, path: Path | str, backups: int = 2) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.backups = max(0, backups)

    def _candidate_paths(self) -> list[Path]:
        paths = [self.path]
        for idx in range(1, self.backups + 1):
            paths.append(self.path.with_suffix(self.path.suffix + f".bak{idx}"))
        return paths

    def _read_raw(self, path: Path) -> Any | None:
        """Return decoded JSON, ``_EMPTY`` for an empty file, ``None`` if unusable."""
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - surfaced to callers
            raise StoreError(str(exc)) from exc
        if not raw:
            return _EMPTY
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def _write_raw(self, path: Path, data: Any) -> None:
        payload = json.dumps(data, indent=2)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:  # pragma: no cover - bubbled up to callers
            raise StoreError(str(exc)) from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    def _rotate_backups(self) -> None:
        if self.backups <= 0:
            return
        for idx in range(self.backups, 0, -1):
            if idx == 1:
                src = self.path
            else:
                src = self.path.with_suffix(self.path.suffix + f".bak{idx - 1}")
            dest = self.path.with_suffix(self.path.suffix + f".bak{idx}")
            if src.exists():
                try:
                    os.replace(src, dest)
                except OSError:
                    # Rotation is best effort; the new write still happens.
                    continue


class JsonStore(_BackedUpFile):
    """Tiny JSON document store keyed by string.

    Used by the client as its "local storage": session token, current user and
    the mock user registry all live in one small JSON object.
    """

    def _read_json(self, path: Path) -> Dict[str, Any] | None:
        data = self._read_raw(path)
        if data is _EMPTY:
            return {}
        if data is None:
            return None
        return data if isinstance(data, dict) else {}

    def _load(self) -> Dict[str, Any]:
        for candidate in self._candidate_paths():
            data = self._read_json(candidate)
            if data is not None:
                return data
        return {}

    def _dump(self, data: Dict[str, Any]) -> None:
        self._rotate_backups()
        self._write_raw(self.path, data)

    def get(self, key: str, default: Any | None = None) -> Any:
        return self._load().get(key, default)

    def put(self, key: str, value: Any) -> Any:
        data = self._load()
        data[key] = value
        self._dump(data)
        return value

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)

    def all(self) -> Dict[str, Any]:
        return self._load()


class ListStore(_BackedUpFile):
    """JSON list store with atomic writes and backup recovery."""

    def __init__(
        self,
        path: Path | str,
        backups: int = 2,
        *,
        recovery_label: str | None = None,
    ) -> None:
        super().__init__(path, backups=backups)
        self._recovery_label = recovery_label

    def _read_json(self, path: Path) -> List[Dict[str, Any]] | None:
        data = self._read_raw(path)
        if data is _EMPTY:
            return []
        return data if isinstance(data, list) else None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(self) -> List[Dict[str, Any]]:
        for candidate in self._candidate_paths():
            data = self._read_json(candidate)
            if data is not None:
                if candidate != self.path and self._recovery_label:
                    logger.warning("Recovered %s from backup %s", self._recovery_label, candidate.name)
                return list(data)
        return []

    def save(self, items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        snapshot: List[Dict[str, Any]] = []
        for item in items:
            snapshot.append(dict(item))
        self._rotate_backups()
        self._write_raw(self.path, snapshot)
        return snapshot

    def mutate(
        self,
        mutator: Callable[[List[Dict[str, Any]]], Iterable[Dict[str, Any]] | None],
    ) -> List[Dict[str, Any]]:
        snapshot = self.load()
        outcome = mutator(snapshot)
        if outcome is None:
            updated: Sequence[Dict[str, Any]] = snapshot
        else:
            updated = [dict(item) for item in outcome]
        return self.save(updated)

"""Bounded on-disk cache of member registrations saved while offline."""

import json
import logging
import os
import tempfile
import threading
from typing import Callable, List

from ..models.base import isoformat_z, utcnow

logger = logging.getLogger(__name__)

MAX_ENTRIES = 50


def _now_iso() -> str:
    return isoformat_z(utcnow())


class LocalMemberCache:
    """
    Newest-first JSON list of member dicts, capped at `max_entries`.

    Every change is a read-modify-write under one lock, written through a
    temporary file and os.replace, so two fallbacks never drop each other.
    """

    def __init__(self, path: str, max_entries: int = MAX_ENTRIES):
        self.path = path
        self.max_entries = max_entries
        self._lock = threading.Lock()

    def entries(self) -> List[dict]:
        with self._lock:
            return self._load()

    def add(self, member: dict, created_at: str = None) -> List[dict]:
        entry = {**member, "createdAt": created_at or _now_iso()}
        return self._update(lambda items: [entry] + items)

    def remove(self, member_id: str) -> List[dict]:
        return self._update(lambda items: [m for m in items if m.get("memberId") != member_id])

    def clear(self) -> None:
        self._update(lambda items: [])

    def __len__(self) -> int:
        return len(self.entries())

    # ------------------------------------------------------------------

    def _update(self, change: Callable[[List[dict]], List[dict]]) -> List[dict]:
        with self._lock:
            items = change(self._load())[: self.max_entries]
            self._save(items)
            return list(items)

    def _load(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.warning("local member cache at %s is unreadable; starting empty", self.path)
            return []
        return data if isinstance(data, list) else []

    def _save(self, items: List[dict]) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=folder, prefix=".members-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

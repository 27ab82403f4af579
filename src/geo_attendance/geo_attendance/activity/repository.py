from __future__ import annotations

from typing import Protocol

from .model import ActivityLogEntry


class ActivityLogRepository(Protocol):
    def add(self, entry: ActivityLogEntry) -> int:
        raise NotImplementedError

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class SettingsRepository(Protocol):
    """Key/value settings store (values are JSON objects)."""

    def get(self, key: str) -> Optional[dict[str, Any]]:
        raise NotImplementedError

    def put_many(self, values: Mapping[str, dict[str, Any]]) -> None:
        """Store several keys at once; either all are written or none."""
        raise NotImplementedError

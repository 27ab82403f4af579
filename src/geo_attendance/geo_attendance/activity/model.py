from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import ActivityAction


@dataclass(frozen=True)
class ActivityLogEntry:
    """Audit entry; ``user_id`` is the acting user, not necessarily the record owner."""

    user_id: int
    action: ActivityAction
    resource_type: str
    resource_id: Optional[int]
    details: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    log_id: Optional[int] = None

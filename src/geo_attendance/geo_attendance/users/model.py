from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: read-only here; user management lives outside this service.
    """

    user_id: int
    full_name: str
    email: str
    role: Role
    department: Optional[str] = None
    position: Optional[str] = None
    is_active: bool = True

    @property
    def can_act_for_others(self) -> bool:
        return self.role in (Role.ADMIN, Role.MANAGER)

"""Caller identity handed over by the upstream auth gateway."""
from dataclasses import dataclass
from typing import Optional

from app.core.constants import ADMIN_ROLE


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

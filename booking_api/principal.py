"""Typed identity attached to authenticated requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .core.enums import Role


@dataclass(frozen=True)
class UserPrincipal:
    """Verified caller identity decoded from a bearer token."""

    user_id: str
    email: str
    role: Role

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def is_provider(self) -> bool:
        return self.role is Role.PROVIDER

    @property
    def is_customer(self) -> bool:
        return self.role is Role.CUSTOMER

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles

    def to_claims(self) -> Dict[str, Any]:
        return {"sub": self.user_id, "email": self.email, "role": self.role.value}

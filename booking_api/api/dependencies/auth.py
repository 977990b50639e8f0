# booking_api/api/dependencies/auth.py
"""
Access guard.

``get_current_principal`` rejects requests without a valid bearer token;
``require_roles`` additionally restricts the caller's role. Both hand the
route a typed ``UserPrincipal``.
"""

from typing import Callable, Optional

from fastapi import Depends

from ...auth import oauth2_scheme_optional
from ...core.enums import Role
from ...core.exceptions import ForbiddenException
from ...principal import UserPrincipal
from ...services.auth_service import AuthService


async def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme_optional),
) -> UserPrincipal:
    """
    Missing token -> 401; invalid or expired token -> 403.
    """
    return AuthService.verify_token(token)


def require_roles(*roles: Role) -> Callable[..., UserPrincipal]:
    """
    Build a dependency that only lets the given roles through.

    Usage:
        principal: UserPrincipal = Depends(require_roles(Role.PROVIDER))
    """
    required = " or ".join(role.value for role in roles)

    async def _check_role(
        principal: UserPrincipal = Depends(get_current_principal),
    ) -> UserPrincipal:
        if not principal.has_role(*roles):
            raise ForbiddenException(
                f"Access denied. Required role: {required}", code="ROLE_REQUIRED"
            )
        return principal

    return _check_role


require_customer = require_roles(Role.CUSTOMER)

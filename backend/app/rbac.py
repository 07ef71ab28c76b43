from __future__ import annotations

from fastapi import Depends

from .auth import Principal, get_current_user
from .errors import Forbidden

# purpose: one capability gate applied before every mutating operation
# status: active

_ROLE_LEVELS: dict[str, int] = {
    "user": 10,
    "admin": 100,
}


def role_level(role: str) -> int:
    return _ROLE_LEVELS.get(role, 0)


def check_role(principal: Principal, required: str) -> Principal:
    """Return the principal when its role ranks at least ``required``."""

    if required not in _ROLE_LEVELS:
        raise ValueError(f"Unknown role: {required}")
    if role_level(principal.role) < _ROLE_LEVELS[required]:
        raise Forbidden(f"{required.capitalize()} role required")
    return principal


def require_role(required: str):
    """Build a FastAPI dependency resolving the caller and enforcing ``required``."""

    if required not in _ROLE_LEVELS:
        raise ValueError(f"Unknown role: {required}")

    async def dependency(principal: Principal = Depends(get_current_user)) -> Principal:
        return check_role(principal, required)

    dependency.__name__ = f"require_{required}"
    return dependency


require_user = require_role("user")
require_admin = require_role("admin")

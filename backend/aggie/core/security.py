"""Capability checks.

Routes declare the capability they need (``view data``, ``edit reports``,
``delete data``); an :class:`Authorizer` decides whether the current request
holds it. The default implementation maps the user's role to a fixed set of
capabilities.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Protocol

from fastapi import Request

from aggie.models.user_model import User

VIEW_DATA = "view data"
EDIT_REPORTS = "edit reports"
DELETE_DATA = "delete data"

ROLE_CAPABILITIES: Dict[str, FrozenSet[str]] = {
    "viewer": frozenset({VIEW_DATA}),
    "monitor": frozenset({VIEW_DATA, EDIT_REPORTS}),
    "admin": frozenset({VIEW_DATA, EDIT_REPORTS, DELETE_DATA}),
}


class Authorizer(Protocol):
    def capabilities_for(self, user: User) -> FrozenSet[str]: ...

    def allows(self, capability: str, request: Request) -> bool: ...


class RoleAuthorizer:
    """Grant capabilities from the role of ``request.state.user``."""

    def capabilities_for(self, user: User) -> FrozenSet[str]:
        return ROLE_CAPABILITIES.get(user.role, frozenset())

    def allows(self, capability: str, request: Request) -> bool:
        user = getattr(request.state, "user", None)
        if user is None:
            return False
        return capability in self.capabilities_for(user)

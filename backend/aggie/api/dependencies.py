"""
Shared API dependencies/state.

This module centralizes the store singleton, the authorizer and the
``Depends`` providers so route modules can stay thin and consistent.
Tests swap any of the ``get_*`` providers through
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, Request

from aggie.core.config import Settings, settings
from aggie.core.security import Authorizer, RoleAuthorizer
from aggie.models.database import ReportStore
from aggie.models.user_model import User
from aggie.services.batch_service import BatchService

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"
ANONYMOUS_ID = "anonymous"


# ── Singletons ────────────────────────────────────────────────────────────────
store = ReportStore(settings.sqlite_path)
authorizer = RoleAuthorizer()


def get_settings() -> Settings:
    return settings


def get_store() -> ReportStore:
    return store


def get_authorizer() -> Authorizer:
    return authorizer


def get_batch_service(
    report_store: ReportStore = Depends(get_store),
    cfg: Settings = Depends(get_settings),
) -> BatchService:
    return BatchService(report_store, batch_size=cfg.batch_size)


def get_current_user(request: Request, cfg: Settings = Depends(get_settings)) -> User:
    """Resolve the caller from the headers set by the upstream proxy."""
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip() or ANONYMOUS_ID
    role = (request.headers.get(USER_ROLE_HEADER) or "").strip().lower() or cfg.default_role
    user = User(_id=user_id, username=user_id, role=role)
    request.state.user = user
    return user


def require(capability: str) -> Callable[..., User]:
    """Dependency factory: 403 unless the current user holds ``capability``."""

    def _check(
        request: Request,
        user: User = Depends(get_current_user),
        auth: Authorizer = Depends(get_authorizer),
    ) -> User:
        if not auth.allows(capability, request):
            raise HTTPException(status_code=403, detail="Forbidden")
        return user

    return _check

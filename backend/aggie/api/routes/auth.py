"""Auth routes (identity comes from the upstream proxy headers)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from aggie.api import dependencies as deps
from aggie.core.security import Authorizer
from aggie.models.user_model import User

router = APIRouter()


@router.get("/auth/me")
async def me(
    user: User = Depends(deps.get_current_user),
    auth: Authorizer = Depends(deps.get_authorizer),
):
    return {"user": user.model_dump(by_alias=True), "capabilities": sorted(auth.capabilities_for(user))}

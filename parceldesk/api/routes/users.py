"""
User endpoints
==============

GET   /api/v1/users                -- all users
POST  /api/v1/users                -- register on first sign-in (201, or 200 if known)
GET   /api/v1/users/role?email=    -- role lookup
PATCH /api/v1/users/{user_id}/role -- toggle admin on / off
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.api.dependencies import get_db
from parceldesk.api.middleware import limiter
from parceldesk.api.schemas import (
    RoleResponse,
    RoleToggleResponse,
    UserCreateRequest,
    UserRegisterResponse,
    UserResponse,
)
from parceldesk.config import settings
from parceldesk.domain.validation import parse_id
from parceldesk.services.lifecycle import LifecycleService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List all users",
)
@limiter.limit(settings.rate_limit)
async def list_users(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).list_users()


@router.post(
    "",
    status_code=201,
    response_model=UserRegisterResponse,
    summary="Register a user",
    responses={200: {"description": "User already exists."}},
)
@limiter.limit(settings.rate_limit)
async def register_user(
    request: Request,
    response: Response,
    body: UserCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    user, created = await LifecycleService(db).register_user(
        body.email, name=body.name, photo_url=body.photo_url
    )
    if not created:
        response.status_code = 200
        return UserRegisterResponse(message="User already exists", id=user.id)
    return UserRegisterResponse(message="User added", id=user.id)


@router.get(
    "/role",
    response_model=RoleResponse,
    summary="Look up a user's role",
)
@limiter.limit(settings.rate_limit)
async def get_role(
    request: Request,
    email: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    return RoleResponse(role=await LifecycleService(db).get_role(email))


@router.patch(
    "/{user_id}/role",
    response_model=RoleToggleResponse,
    summary="Toggle the admin role",
    description=(
        "Promotes to ``admin`` remembering the current role, or demotes an "
        "admin back to the remembered role (``user`` if none)."
    ),
)
@limiter.limit(settings.rate_limit)
async def toggle_role(
    request: Request,
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    change = await LifecycleService(db).toggle_admin_role(parse_id(user_id, "user id"))
    return RoleToggleResponse(new_role=change.new_role, modified=change.modified)

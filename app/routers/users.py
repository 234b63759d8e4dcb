"""Account endpoints: registration, sessions, profile and handle lookups."""

from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId
from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from app.models.common import ApiResponse
from app.models.user import (
    AccountUpdate,
    AvatarUpdate,
    LoginResult,
    PasswordChange,
    RefreshRequest,
    TokenPair,
    UserCreate,
    UserLogin,
    UsernameExists,
    UserProfile,
    UserPublic,
    UserSummary,
)
from app.routers.deps import get_current_user, get_optional_viewer
from app.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter()

_COOKIE_OPTIONS: dict[str, Any] = {"httponly": True, "secure": True}


# ---------------------------------------------------------------------------
# Registration & sessions
# ---------------------------------------------------------------------------

@router.post("/register", status_code=201, response_model=ApiResponse[UserPublic])
def register_user(payload: UserCreate) -> ApiResponse[UserPublic]:
    user = user_service.register(payload)
    return ApiResponse.ok(user, "User registered successfully", status_code=201)


@router.post("/login")
def login_user(payload: UserLogin) -> JSONResponse:
    """Issue tokens in the body and as http-only cookies."""
    result: LoginResult = user_service.login(payload.email, payload.password)
    envelope = ApiResponse.ok(result, "User logged in successfully")
    response = JSONResponse(content=envelope.model_dump(mode="json", by_alias=True))
    response.set_cookie("accessToken", result.access_token, **_COOKIE_OPTIONS)
    response.set_cookie("refreshToken", result.refresh_token, **_COOKIE_OPTIONS)
    return response


@router.get("/logout")
def logout_user(current_user: dict[str, Any] = Depends(get_current_user)) -> JSONResponse:
    user_service.logout(current_user["_id"])
    envelope = ApiResponse.ok({}, "User logged out successfully")
    response = JSONResponse(content=envelope.model_dump(mode="json", by_alias=True))
    response.delete_cookie("accessToken")
    response.delete_cookie("refreshToken")
    return response


@router.post("/refresh-token")
def refresh_access_token(request: Request, payload: RefreshRequest | None = None) -> JSONResponse:
    """Rotate tokens; the refresh token comes from the body or the ``refreshToken`` cookie."""
    incoming = payload.refresh_token if payload else None
    tokens: TokenPair = user_service.refresh_tokens(incoming or request.cookies.get("refreshToken"))
    envelope = ApiResponse.ok(tokens, "Access token refreshed")
    response = JSONResponse(content=envelope.model_dump(mode="json", by_alias=True))
    response.set_cookie("accessToken", tokens.access_token, **_COOKIE_OPTIONS)
    response.set_cookie("refreshToken", tokens.refresh_token, **_COOKIE_OPTIONS)
    return response


@router.post("/change-password", response_model=ApiResponse[dict])
def change_password(
    payload: PasswordChange,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[dict]:
    user_service.change_password(current_user["_id"], payload.old_password, payload.new_password)
    return ApiResponse.ok({}, "Password changed successfully")


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

@router.get("/current-user", response_model=ApiResponse[UserPublic])
def current_user_info(
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[UserPublic]:
    return ApiResponse.ok(user_service.public_user(current_user), "User fetched successfully")


@router.post("/update-user", response_model=ApiResponse[UserPublic])
def update_account(
    payload: AccountUpdate,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[UserPublic]:
    user = user_service.update_account(current_user["_id"], payload)
    return ApiResponse.ok(user, "Account details updated successfully")


@router.post("/upload-avatar", response_model=ApiResponse[UserPublic])
def upload_avatar(
    payload: AvatarUpdate,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[UserPublic]:
    user = user_service.update_avatar(current_user["_id"], payload.avatar)
    return ApiResponse.ok(user, "Avatar updated successfully")


# ---------------------------------------------------------------------------
# Profiles & lookups
# ---------------------------------------------------------------------------

@router.get("/profile/{user_name}", response_model=ApiResponse[UserProfile])
def user_profile(
    user_name: str,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[UserProfile]:
    profile = user_service.get_profile(user_name, viewer_id)
    return ApiResponse.ok(profile, "User profile fetched successfully")


@router.get("/exists/u/{user_name}", response_model=ApiResponse[UsernameExists])
def check_username_exists(user_name: str) -> ApiResponse[UsernameExists]:
    exists = user_service.username_exists(user_name)
    message = "Username already exists" if exists else "Username is available"
    return ApiResponse.ok(UsernameExists(exists=exists), message)


@router.get("/get-searched-users/{user_name_query}", response_model=ApiResponse[list[UserSummary]])
def searched_users(user_name_query: str) -> ApiResponse[list[UserSummary]]:
    found = user_service.search_users(user_name_query)
    message = "Users fetched successfully" if found else "No users found"
    return ApiResponse.ok(found, message)

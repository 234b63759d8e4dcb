"""User accounts: registration, sessions, profile data and handle lookups.

Handles and emails are stored trimmed and lower-cased; uniqueness is
checked before insert and backed by unique indexes.  Password hashes and
refresh tokens never leave this module.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.constants import LIKES, PRIVATE_USER_FIELDS, REELS, RELATIONSHIPS, USERS
from app.core.exceptions import (
    AuthenticationError,
    InvalidCredentials,
    PersistenceFailure,
    UserAlreadyExists,
    UserNotFound,
    ValidationFailed,
)
from app.core.security import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.db.mongo import get_collection, utcnow
from app.models.user import (
    AccountUpdate,
    LoginResult,
    TokenPair,
    UserCreate,
    UserProfile,
    UserPublic,
    UserSummary,
)
from app.services.toggle import has_actor
from app.services.validators import validate_id

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shaping helpers
# ---------------------------------------------------------------------------

def user_summary(doc: dict[str, Any]) -> UserSummary:
    """Build the ``{_id, user_name, avatar}`` card for a user document."""
    return UserSummary(id=str(doc["_id"]), user_name=doc["user_name"], avatar=doc.get("avatar"))


def public_user(doc: dict[str, Any]) -> UserPublic:
    """Build the public view of a user document."""
    return UserPublic(
        id=str(doc["_id"]),
        full_name=doc["full_name"],
        user_name=doc["user_name"],
        email=doc["email"],
        profile_tag=doc["profile_tag"],
        avatar=doc.get("avatar"),
        saved_reels=[str(reel_id) for reel_id in doc.get("saved_reels", [])],
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


def _normalize_handle(value: str) -> str:
    return value.strip().lower()


def get_user(user_id: ObjectId) -> dict[str, Any]:
    """Return the user document without private fields."""
    user = get_collection(USERS).find_one({"_id": user_id}, PRIVATE_USER_FIELDS)
    if user is None:
        raise UserNotFound()
    return user


# ---------------------------------------------------------------------------
# Registration & sessions
# ---------------------------------------------------------------------------

def register(payload: UserCreate) -> UserPublic:
    """Create a user account.

    Raises:
        ValidationFailed: a required field is blank.
        UserAlreadyExists: the handle or email is taken.
    """
    fields = [
        payload.full_name,
        payload.user_name,
        payload.email,
        payload.profile_tag,
        payload.password,
        payload.avatar,
    ]
    if any(not field or not field.strip() for field in fields):
        raise ValidationFailed("All fields are required")

    user_name = _normalize_handle(payload.user_name)
    email = _normalize_handle(payload.email)

    users = get_collection(USERS)
    if users.find_one({"$or": [{"user_name": user_name}, {"email": email}]}, {"_id": 1}):
        raise UserAlreadyExists()

    now = utcnow()
    try:
        result = users.insert_one(
            {
                "full_name": payload.full_name.strip(),
                "user_name": user_name,
                "email": email,
                "profile_tag": payload.profile_tag.strip(),
                "avatar": payload.avatar.strip(),
                "saved_reels": [],
                "password": hash_password(payload.password),
                "refresh_token": "",
                "created_at": now,
                "updated_at": now,
            }
        )
    except DuplicateKeyError as exc:
        raise UserAlreadyExists() from exc

    created = users.find_one({"_id": result.inserted_id}, PRIVATE_USER_FIELDS)
    if created is None:
        raise PersistenceFailure("Something went wrong while registering the user")

    logger.info("user_registered", extra={"user_id": str(result.inserted_id)})
    return public_user(created)


def _issue_tokens(user: dict[str, Any]) -> TokenPair:
    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)
    get_collection(USERS).update_one(
        {"_id": user["_id"]},
        {"$set": {"refresh_token": refresh_token}},
    )
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


def login(email: str, password: str) -> LoginResult:
    """Verify credentials and issue an access / refresh token pair."""
    if not email or not email.strip():
        raise ValidationFailed("Email is required")

    user = get_collection(USERS).find_one({"email": _normalize_handle(email)})
    if user is None:
        raise UserNotFound("User does not exist")
    if not verify_password(password, user.get("password")):
        raise InvalidCredentials()

    tokens = _issue_tokens(user)
    logger.info("user_logged_in", extra={"user_id": str(user["_id"])})
    return LoginResult(
        user=public_user(get_user(user["_id"])),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


def logout(user_id: ObjectId) -> None:
    """Invalidate the stored refresh token."""
    get_collection(USERS).update_one({"_id": user_id}, {"$set": {"refresh_token": ""}})
    logger.info("user_logged_out", extra={"user_id": str(user_id)})


def refresh_tokens(refresh_token: str | None) -> TokenPair:
    """Rotate the token pair of the user owning *refresh_token*.

    Raises:
        AuthenticationError: the token is missing, invalid, belongs to no
            user, or is not the one currently stored for that user.
    """
    if not refresh_token:
        raise AuthenticationError()

    claims = decode_token(refresh_token, TokenType.refresh)
    if not ObjectId.is_valid(claims["_id"]):
        raise AuthenticationError("Invalid refresh token")

    user = get_collection(USERS).find_one({"_id": ObjectId(claims["_id"])})
    if user is None:
        raise AuthenticationError("Invalid refresh token")
    if refresh_token != user.get("refresh_token"):
        raise AuthenticationError("Refresh token is expired or used")

    return _issue_tokens(user)


def change_password(user_id: ObjectId, old_password: str, new_password: str) -> None:
    """Replace the password after verifying the current one."""
    if not old_password or not new_password:
        raise ValidationFailed("Old password and new password are required")
    if old_password == new_password:
        raise ValidationFailed("New password cannot be the same as old password")

    users = get_collection(USERS)
    user = users.find_one({"_id": user_id}, {"password": 1})
    if user is None:
        raise UserNotFound()
    if not verify_password(old_password, user.get("password")):
        raise ValidationFailed("Old password is incorrect")

    users.update_one(
        {"_id": user_id},
        {"$set": {"password": hash_password(new_password), "updated_at": utcnow()}},
    )
    logger.info("password_changed", extra={"user_id": str(user_id)})


# ---------------------------------------------------------------------------
# Account updates
# ---------------------------------------------------------------------------

def _update_user(user_id: ObjectId, changes: dict[str, Any]) -> UserPublic:
    try:
        updated = get_collection(USERS).find_one_and_update(
            {"_id": user_id},
            {"$set": {**changes, "updated_at": utcnow()}},
            projection=PRIVATE_USER_FIELDS,
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError as exc:
        raise UserAlreadyExists() from exc
    if updated is None:
        raise UserNotFound()
    return public_user(updated)


def update_account(user_id: ObjectId, payload: AccountUpdate) -> UserPublic:
    """Overwrite name, handle, email and profile tag."""
    fields = [payload.full_name, payload.user_name, payload.email, payload.profile_tag]
    if any(not field or not field.strip() for field in fields):
        raise ValidationFailed("All fields are required")

    user_name = _normalize_handle(payload.user_name)
    email = _normalize_handle(payload.email)
    clash = get_collection(USERS).find_one(
        {"_id": {"$ne": user_id}, "$or": [{"user_name": user_name}, {"email": email}]},
        {"_id": 1},
    )
    if clash is not None:
        raise UserAlreadyExists()

    return _update_user(
        user_id,
        {
            "full_name": payload.full_name.strip(),
            "user_name": user_name,
            "email": email,
            "profile_tag": payload.profile_tag.strip(),
        },
    )


def update_avatar(user_id: ObjectId, avatar_url: str) -> UserPublic:
    """Point the user's avatar at a newly hosted image."""
    if not avatar_url or not avatar_url.strip():
        raise ValidationFailed("Avatar file is missing")
    return _update_user(user_id, {"avatar": avatar_url.strip()})


# ---------------------------------------------------------------------------
# Profiles & lookups
# ---------------------------------------------------------------------------

def get_profile(user_name: str, viewer_id: ObjectId | None) -> UserProfile:
    """Return a user's profile with follow counters and post engagement."""
    if not user_name or not user_name.strip():
        raise ValidationFailed("Username is missing")

    pipeline: list[dict[str, Any]] = [
        {"$match": {"user_name": _normalize_handle(user_name)}},
        {
            "$lookup": {
                "from": RELATIONSHIPS,
                "localField": "_id",
                "foreignField": "following",
                "as": "profile_followers",
            },
        },
        {
            "$lookup": {
                "from": RELATIONSHIPS,
                "localField": "_id",
                "foreignField": "follower",
                "as": "profile_follows_to",
            },
        },
        {
            "$lookup": {
                "from": REELS,
                "localField": "_id",
                "foreignField": "owner",
                "as": "posts",
            },
        },
        {
            "$addFields": {
                "profile_followers_count": {"$size": "$profile_followers"},
                "profile_follows_to_count": {"$size": "$profile_follows_to"},
                "posts_count": {"$size": "$posts"},
            },
        },
    ]
    profiles = list(get_collection(USERS).aggregate(pipeline))
    if not profiles:
        raise UserNotFound("Profile does not exist")

    profile = profiles[0]
    post_ids = [post["_id"] for post in profile.get("posts", [])]
    posts_likes_count = (
        get_collection(LIKES).count_documents({"reel_id": {"$in": post_ids}})
        if post_ids
        else 0
    )

    return UserProfile(
        id=str(profile["_id"]),
        full_name=profile["full_name"],
        user_name=profile["user_name"],
        email=profile["email"],
        profile_tag=profile["profile_tag"],
        avatar=profile.get("avatar"),
        profile_followers_count=profile["profile_followers_count"],
        profile_follows_to_count=profile["profile_follows_to_count"],
        is_following=has_actor(profile["profile_followers"], "follower", viewer_id),
        posts_count=profile["posts_count"],
        posts_likes_count=posts_likes_count,
    )


def username_exists(user_name: str) -> bool:
    """Return True when a user already holds *user_name*."""
    if not user_name or not user_name.strip():
        raise ValidationFailed("Username is empty")
    found = get_collection(USERS).find_one({"user_name": _normalize_handle(user_name)}, {"_id": 1})
    return found is not None


def search_users(query: str) -> list[UserSummary]:
    """Return users whose handle starts with *query* (case-insensitive)."""
    if not query or not query.strip():
        raise ValidationFailed("Empty search query")

    pattern = f"^{re.escape(query.strip())}"
    cursor = get_collection(USERS).find(
        {"user_name": {"$regex": pattern, "$options": "i"}},
        {"_id": 1, "user_name": 1, "avatar": 1},
    )
    return [user_summary(doc) for doc in cursor]


def find_user_ids_by_handle(fragment: str) -> list[ObjectId]:
    """Return ids of users whose handle contains *fragment* (case-insensitive)."""
    pattern = re.escape(fragment.strip())
    cursor = get_collection(USERS).find(
        {"user_name": {"$regex": pattern, "$options": "i"}},
        {"_id": 1},
    )
    return [doc["_id"] for doc in cursor]


def resolve_user_id(user_id: str | ObjectId) -> ObjectId:
    """Validate *user_id* and make sure the user exists."""
    user_oid = validate_id(user_id, "User")
    if get_collection(USERS).find_one({"_id": user_oid}, {"_id": 1}) is None:
        raise UserNotFound()
    return user_oid

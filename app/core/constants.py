"""Application constants.

Collection names and the projections shared by several services.
"""

# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------
USERS = "users"
REELS = "reels"
COMMENTS = "comments"
LIKES = "likes"
RELATIONSHIPS = "relationships"

# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------
# Fields never returned to clients.
PRIVATE_USER_FIELDS: dict[str, int] = {"password": 0, "refresh_token": 0}

# ---------------------------------------------------------------------------
# Unique indexes backing the toggles and account uniqueness
# (collection, keys, unique)
# ---------------------------------------------------------------------------
INDEXES: list[tuple[str, list[tuple[str, int]], bool]] = [
    (USERS, [("user_name", 1)], True),
    (USERS, [("email", 1)], True),
    (LIKES, [("liked_by", 1), ("reel_id", 1), ("comment_id", 1)], True),
    (RELATIONSHIPS, [("follower", 1), ("following", 1)], True),
    (COMMENTS, [("reel_id", 1)], False),
    (COMMENTS, [("parent_comment_id", 1)], False),
    (REELS, [("owner", 1)], False),
]

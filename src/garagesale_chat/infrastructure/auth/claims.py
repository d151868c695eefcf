from __future__ import annotations

from typing import Any

import jwt

from garagesale_chat.application.dto.principal import Principal


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Build a Principal from decoded token claims.

    Accepts a standard ``sub`` claim, or the marketplace's legacy
    ``{"user": {"id": ...}}`` payload.
    """
    raw_id = payload.get("sub")
    if raw_id is None:
        raw_id = (payload.get("user") or {}).get("id")
    if raw_id is None:
        raise jwt.InvalidTokenError("Token has no subject")
    try:
        user_id = int(raw_id)
    except (TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError(f"Invalid subject: {raw_id!r}") from exc
    return Principal(user_id=user_id, roles=list(payload.get("roles", [])))

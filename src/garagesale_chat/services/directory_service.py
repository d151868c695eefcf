"""Keep the local mirror of marketplace users and listings current."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from garagesale_chat.application.exceptions import ValidationError
from garagesale_chat.application.uow import UnitOfWork
from garagesale_chat.domain.entities.directory import ItemSummary, UserProfile

logger = logging.getLogger(__name__)


def _required_int(fields: dict[str, Any], key: str) -> int:
    try:
        return int(fields[key])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Missing or invalid '{key}'") from exc


def _optional_price(raw: Any) -> Decimal | None:
    if raw in (None, ""):
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid price: {raw!r}") from exc


async def upsert_user(fields: dict[str, Any], uow: UnitOfWork) -> UserProfile:
    user = UserProfile(
        id=_required_int(fields, "user_id"),
        username=fields.get("username") or "",
        profile_pic=fields.get("profile_pic") or None,
        updated_at=datetime.now(timezone.utc),
    )
    await uow.directory_w.upsert_user(user)
    await uow.commit()
    logger.debug("Upserted user %d", user.id)
    return user


async def upsert_item(fields: dict[str, Any], uow: UnitOfWork) -> ItemSummary:
    item = ItemSummary(
        id=_required_int(fields, "item_id"),
        seller_id=_required_int(fields, "seller_id"),
        name=fields.get("name") or "",
        price=_optional_price(fields.get("price")),
        image_url=fields.get("image_url") or None,
        updated_at=datetime.now(timezone.utc),
    )
    await uow.directory_w.upsert_item(item)
    await uow.commit()
    logger.debug("Upserted item %d (seller %d)", item.id, item.seller_id)
    return item

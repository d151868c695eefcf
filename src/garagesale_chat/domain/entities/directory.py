from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Marketplace user as mirrored into the chat service."""

    id: int
    username: str
    profile_pic: str | None
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class ItemSummary:
    """Marketplace listing as mirrored into the chat service."""

    id: int
    seller_id: int
    name: str
    price: Decimal | None
    image_url: str | None
    updated_at: datetime

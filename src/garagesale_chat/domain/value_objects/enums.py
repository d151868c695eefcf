from __future__ import annotations

from enum import StrEnum


class MarketplaceEvent(StrEnum):
    USER_REGISTERED = "user.registered"
    USER_UPDATED = "user.updated"
    ITEM_CREATED = "item.created"
    ITEM_UPDATED = "item.updated"

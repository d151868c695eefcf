from __future__ import annotations

from garagesale_chat.domain.entities.directory import ItemSummary, UserProfile
from garagesale_chat.infrastructure.db.models.directory import ItemModel, UserModel


def user_to_entity(model: UserModel) -> UserProfile:
    return UserProfile(
        id=model.id,
        username=model.username,
        profile_pic=model.profile_pic,
        updated_at=model.updated_at,
    )


def item_to_entity(model: ItemModel) -> ItemSummary:
    return ItemSummary(
        id=model.id,
        seller_id=model.seller_id,
        name=model.name,
        price=model.price,
        image_url=model.image_url,
        updated_at=model.updated_at,
    )

"""Import all models so Alembic can discover them via Base.metadata."""
from garagesale_chat.infrastructure.db.models.chat import ChatModel
from garagesale_chat.infrastructure.db.models.directory import ItemModel, UserModel
from garagesale_chat.infrastructure.db.models.message import ChatMessageModel

__all__ = [
    "ChatMessageModel",
    "ChatModel",
    "ItemModel",
    "UserModel",
]

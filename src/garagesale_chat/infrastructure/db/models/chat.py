from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, Index, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from garagesale_chat.infrastructure.db.base import Base


class ChatModel(Base):
    __tablename__ = "chats"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    item_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # participant pair, always stored low id first
    user_a_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_b_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_message_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    messages = relationship(
        "ChatMessageModel",
        back_populates="chat",
        lazy="noload",
        order_by="ChatMessageModel.seq",
    )

    __table_args__ = (
        UniqueConstraint("item_id", "user_a_id", "user_b_id", name="uq_chat_item_pair"),
        CheckConstraint("user_a_id < user_b_id", name="ck_chats_ordered_pair"),
        Index("ix_chats_user_a_last_message", "user_a_id", last_message_at.desc()),
        Index("ix_chats_user_b_last_message", "user_b_id", last_message_at.desc()),
    )

"""chat tables

Revision ID: a1c3e5f7b9d0
Revises:
Create Date: 2026-10-19

Creates the directory mirror (directory_users, directory_items), chats keyed
uniquely by (item, ordered participant pair), and chat_messages with an
identity seq and a read_by array.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "a1c3e5f7b9d0"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "directory_users",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("username", sa.String(100), nullable=False, server_default=""),
        sa.Column("profile_pic", sa.Text(), nullable=True),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "directory_items",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("seller_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_directory_items_seller", "directory_items", ["seller_id"], unique=False)

    op.create_table(
        "chats",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("item_id", sa.BigInteger(), nullable=False),
        sa.Column("user_a_id", sa.BigInteger(), nullable=False),
        sa.Column("user_b_id", sa.BigInteger(), nullable=False),
        sa.Column("last_message_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("item_id", "user_a_id", "user_b_id", name="uq_chat_item_pair"),
        sa.CheckConstraint("user_a_id < user_b_id", name="ck_chats_ordered_pair"),
    )
    op.create_index(
        "ix_chats_user_a_last_message",
        "chats",
        ["user_a_id", sa.text("last_message_at DESC")],
        unique=False,
    )
    op.create_index(
        "ix_chats_user_b_last_message",
        "chats",
        ["user_b_id", sa.text("last_message_at DESC")],
        unique=False,
    )

    op.create_table(
        "chat_messages",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=True), nullable=False),
        sa.Column("chat_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sender_id", sa.BigInteger(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read_by", postgresql.ARRAY(sa.BigInteger()), server_default=sa.text("'{}'"), nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_chat_messages_chat_seq", "chat_messages", ["chat_id", "seq"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_chat_messages_chat_seq", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("ix_chats_user_b_last_message", table_name="chats")
    op.drop_index("ix_chats_user_a_last_message", table_name="chats")
    op.drop_table("chats")
    op.drop_index("ix_directory_items_seller", table_name="directory_items")
    op.drop_table("directory_items")
    op.drop_table("directory_users")

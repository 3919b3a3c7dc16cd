"""create board tables

Revision ID: 20250301_01
Revises:
Create Date: 2025-03-01 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20250301_01"
down_revision = None
branch_labels = None
depends_on = None


USER_ROLE = sa.Enum("user", "admin", name="user_role")
MESSAGE_TYPE = sa.Enum("channel", "thread_reply", name="message_type")
NOTIFICATION_TYPE = sa.Enum(
    "info",
    "success",
    "warning",
    "error",
    "mention",
    "reaction",
    "moderation",
    name="notification_type",
)
REASON_SEVERITY = sa.Enum("low", "medium", "high", "critical", name="reason_severity")
CONTENT_ACTION_TYPE = sa.Enum("delete", "restore", "hide", "warn", name="content_action_type")


def _timestamp(name: str, *, onupdate: bool = False) -> sa.Column:
    kwargs = {"onupdate": sa.func.now()} if onupdate else {}
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
        **kwargs,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("login", sa.String(length=64), nullable=False, unique=True),
        sa.Column("login_key", sa.String(length=64), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=128), nullable=True),
        sa.Column("display_name_key", sa.String(length=128), nullable=True),
        sa.Column("role", USER_ROLE, nullable=False, server_default="user"),
        _timestamp("created_at"),
        _timestamp("updated_at", onupdate=True),
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_users_login_key", "users", ["login_key"])
    op.create_index("ix_users_display_name_key", "users", ["display_name_key"])

    op.create_table(
        "deletion_reasons",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("severity", REASON_SEVERITY, nullable=False, server_default="medium"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "board_categories",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=16), nullable=False, server_default="#3B82F6"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        _timestamp("created_at"),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "board_channels",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("board_categories.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "created_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at", onupdate=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_live", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.UniqueConstraint(
            "category_id", "name", "is_live", name="uq_channel_category_name"
        ),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "board_messages",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "channel_id",
            sa.Integer(),
            sa.ForeignKey("board_channels.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "thread_id",
            sa.Integer(),
            sa.ForeignKey("board_messages.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column(
            "author_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("message_type", MESSAGE_TYPE, nullable=False, server_default="channel"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at", onupdate=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "deleted_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "deletion_reason_id",
            sa.Integer(),
            sa.ForeignKey("deletion_reasons.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("deletion_custom_reason", sa.String(length=500), nullable=True),
        mysql_charset="utf8mb4",
    )
    op.create_index(
        "ix_board_messages_channel_created_at", "board_messages", ["channel_id", "created_at"]
    )
    op.create_index("ix_board_messages_thread", "board_messages", ["thread_id", "created_at"])

    op.create_table(
        "board_reactions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "message_id",
            sa.Integer(),
            sa.ForeignKey("board_messages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("emoji_code", sa.String(length=64), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint(
            "message_id", "user_id", "emoji_code", name="uq_reaction_message_user_emoji"
        ),
        mysql_charset="utf8mb4",
    )
    op.create_index("ix_board_reactions_message", "board_reactions", ["message_id"])

    op.create_table(
        "board_mentions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "message_id",
            sa.Integer(),
            sa.ForeignKey("board_messages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "mentioned_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _timestamp("created_at"),
        sa.UniqueConstraint("message_id", "mentioned_user_id", name="uq_mention_message_user"),
        mysql_charset="utf8mb4",
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", NOTIFICATION_TYPE, nullable=False, server_default="info"),
        sa.Column("link", sa.String(length=512), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("metadata", sa.JSON(), nullable=True),
        _timestamp("created_at"),
        mysql_charset="utf8mb4",
    )
    op.create_index(
        "ix_notifications_user_created_at", "notifications", ["user_id", "created_at"]
    )

    op.create_table(
        "content_action_logs",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("action_type", CONTENT_ACTION_TYPE, nullable=False),
        sa.Column("content_type", sa.String(length=32), nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=False),
        sa.Column("content_title", sa.String(length=255), nullable=True),
        sa.Column(
            "content_author_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "performed_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "deletion_reason_id",
            sa.Integer(),
            sa.ForeignKey("deletion_reasons.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("custom_reason", sa.String(length=500), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column(
            "is_notification_sent", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        _timestamp("created_at"),
        mysql_charset="utf8mb4",
    )
    op.create_index(
        "ix_content_action_logs_author",
        "content_action_logs",
        ["content_author_id", "created_at"],
    )
    op.create_index(
        "ix_content_action_logs_content",
        "content_action_logs",
        ["content_type", "content_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_content_action_logs_content", table_name="content_action_logs")
    op.drop_index("ix_content_action_logs_author", table_name="content_action_logs")
    op.drop_table("content_action_logs")
    op.drop_index("ix_notifications_user_created_at", table_name="notifications")
    op.drop_table("notifications")
    op.drop_table("board_mentions")
    op.drop_index("ix_board_reactions_message", table_name="board_reactions")
    op.drop_table("board_reactions")
    op.drop_index("ix_board_messages_thread", table_name="board_messages")
    op.drop_index("ix_board_messages_channel_created_at", table_name="board_messages")
    op.drop_table("board_messages")
    op.drop_table("board_channels")
    op.drop_table("board_categories")
    op.drop_table("deletion_reasons")
    op.drop_index("ix_users_display_name_key", table_name="users")
    op.drop_index("ix_users_login_key", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        CONTENT_ACTION_TYPE,
        REASON_SEVERITY,
        NOTIFICATION_TYPE,
        MESSAGE_TYPE,
        USER_ROLE,
    ):
        enum_type.drop(bind, checkfirst=True)

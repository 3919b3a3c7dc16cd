from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.core.slug import mention_key
from app.models.base import Base
from app.models.enums import (
    ContentActionType,
    MessageType,
    NotificationType,
    ReasonSeverity,
    UserRole,
)


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class User(Base):
    """Community member."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    login: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    login_key: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(128))
    display_name_key: Mapped[str | None] = mapped_column(String(128), index=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role", values_callable=_enum_values),
        default=UserRole.USER,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    messages: Mapped[list["Message"]] = relationship(
        back_populates="author", foreign_keys="Message.author_id"
    )
    notifications: Mapped[list["Notification"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    @validates("login", "display_name")
    def _sync_mention_keys(self, key: str, value: str | None) -> str | None:
        if key == "login":
            self.login_key = mention_key(value)
        else:
            self.display_name_key = mention_key(value) if value else None
        return value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def public_name(self) -> str:
        return self.display_name or self.login


class BoardCategory(Base):
    """Top-level grouping of board channels."""

    __tablename__ = "board_categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#3B82F6")
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    channels: Mapped[list["Channel"]] = relationship(
        back_populates="category", order_by="Channel.sort_order"
    )


class Channel(Base):
    """Named container of messages inside a category."""

    __tablename__ = "board_channels"
    __table_args__ = (
        UniqueConstraint("category_id", "name", "is_live", name="uq_channel_category_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("board_categories.id", ondelete="RESTRICT"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    # NULL once deleted so the name can be taken again
    is_live: Mapped[bool | None] = mapped_column(Boolean, default=True)

    category: Mapped[BoardCategory] = relationship(back_populates="channels")
    created_by: Mapped[User | None] = relationship(foreign_keys=[created_by_id])
    messages: Mapped[list["Message"]] = relationship(back_populates="channel")


class Message(Base):
    """Message posted to a channel or replying into a thread."""

    __tablename__ = "board_messages"
    __table_args__ = (
        Index("ix_board_messages_channel_created_at", "channel_id", "created_at"),
        Index("ix_board_messages_thread", "thread_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    channel_id: Mapped[int] = mapped_column(
        ForeignKey("board_channels.id", ondelete="RESTRICT"), nullable=False
    )
    thread_id: Mapped[int | None] = mapped_column(
        ForeignKey("board_messages.id", ondelete="RESTRICT"), nullable=True
    )
    author_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    content: Mapped[str] = mapped_column(Text, nullable=False)
    message_type: Mapped[MessageType] = mapped_column(
        SAEnum(MessageType, name="message_type", values_callable=_enum_values),
        default=MessageType.CHANNEL,
        nullable=False,
    )
    like_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    deleted_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    deletion_reason_id: Mapped[int | None] = mapped_column(
        ForeignKey("deletion_reasons.id", ondelete="SET NULL"), nullable=True
    )
    deletion_custom_reason: Mapped[str | None] = mapped_column(String(500))

    channel: Mapped[Channel] = relationship(back_populates="messages")
    author: Mapped[User | None] = relationship(
        back_populates="messages", foreign_keys=[author_id]
    )
    thread: Mapped[Message | None] = relationship(
        remote_side="Message.id", back_populates="replies", foreign_keys=[thread_id]
    )
    replies: Mapped[list["Message"]] = relationship(
        back_populates="thread", foreign_keys=[thread_id]
    )
    reactions: Mapped[list["Reaction"]] = relationship(
        back_populates="message", cascade="all, delete-orphan", order_by="Reaction.created_at"
    )
    mentions: Mapped[list["Mention"]] = relationship(
        back_populates="message", cascade="all, delete-orphan"
    )
    deleted_by: Mapped[User | None] = relationship(foreign_keys=[deleted_by_id])
    deletion_reason: Mapped["DeletionReason | None"] = relationship()

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_thread_root(self) -> bool:
        return self.thread_id is None


class Reaction(Base):
    """Single emoji reaction left by a user on a message."""

    __tablename__ = "board_reactions"
    __table_args__ = (
        UniqueConstraint(
            "message_id", "user_id", "emoji_code", name="uq_reaction_message_user_emoji"
        ),
        Index("ix_board_reactions_message", "message_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    message_id: Mapped[int] = mapped_column(
        ForeignKey("board_messages.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    emoji_code: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    message: Mapped[Message] = relationship(back_populates="reactions")
    user: Mapped[User] = relationship()


class Mention(Base):
    """Resolved reference from message text to a user."""

    __tablename__ = "board_mentions"
    __table_args__ = (
        UniqueConstraint("message_id", "mentioned_user_id", name="uq_mention_message_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    message_id: Mapped[int] = mapped_column(
        ForeignKey("board_messages.id", ondelete="CASCADE"), nullable=False
    )
    mentioned_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    message: Mapped[Message] = relationship(back_populates="mentions")
    mentioned_user: Mapped[User] = relationship()


class Notification(Base):
    """Notification addressed to a single user."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_created_at", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        SAEnum(NotificationType, name="notification_type", values_callable=_enum_values),
        default=NotificationType.INFO,
        nullable=False,
    )
    link: Mapped[str | None] = mapped_column(String(512))
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # "metadata" is reserved on declarative classes.
    extra: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped[User] = relationship(back_populates="notifications")


class DeletionReason(Base):
    """Reference list of reasons moderators can cite."""

    __tablename__ = "deletion_reasons"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    severity: Mapped[ReasonSeverity] = mapped_column(
        SAEnum(ReasonSeverity, name="reason_severity", values_callable=_enum_values),
        default=ReasonSeverity.MEDIUM,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ContentActionLog(Base):
    """Append-only record of an administrative content action."""

    __tablename__ = "content_action_logs"
    __table_args__ = (
        Index("ix_content_action_logs_author", "content_author_id", "created_at"),
        Index("ix_content_action_logs_content", "content_type", "content_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    action_type: Mapped[ContentActionType] = mapped_column(
        SAEnum(ContentActionType, name="content_action_type", values_callable=_enum_values),
        nullable=False,
    )
    content_type: Mapped[str] = mapped_column(String(32), nullable=False)
    content_id: Mapped[int] = mapped_column(Integer, nullable=False)
    content_title: Mapped[str | None] = mapped_column(String(255))
    content_author_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    performed_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    deletion_reason_id: Mapped[int | None] = mapped_column(
        ForeignKey("deletion_reasons.id", ondelete="SET NULL"), nullable=True
    )
    custom_reason: Mapped[str | None] = mapped_column(String(500))
    admin_notes: Mapped[str | None] = mapped_column(Text)
    is_notification_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    performed_by: Mapped[User | None] = relationship(foreign_keys=[performed_by_id])
    content_author: Mapped[User | None] = relationship(foreign_keys=[content_author_id])
    deletion_reason: Mapped[DeletionReason | None] = relationship()

"""Schemas for board categories and channels."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Payload for creating a category; blank names are rejected by the service."""

    name: str = Field(default="", max_length=128)
    description: str | None = Field(default=None, max_length=2000)
    color: str | None = Field(default=None, max_length=16)


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=128)
    description: str | None = Field(default=None, max_length=2000)
    color: str | None = Field(default=None, max_length=16)


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    color: str
    sort_order: int
    created_at: datetime


class ChannelCreate(BaseModel):
    """Payload for creating a channel inside a category."""

    category_id: int | None = None
    name: str = Field(default="", max_length=128)
    description: str | None = Field(default=None, max_length=2000)


class ChannelUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=128)
    description: str | None = Field(default=None, max_length=2000)


class ChannelRead(BaseModel):
    """Serialized channel."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    name: str
    description: str | None = None
    sort_order: int
    created_by_id: int | None = None
    created_at: datetime
    updated_at: datetime


class ChannelWithCount(ChannelRead):
    message_count: int = Field(0, ge=0, description="Number of non-deleted messages")


class CategoryWithChannels(CategoryRead):
    """Category listing entry with nested channels."""

    channels: list[ChannelWithCount] = Field(default_factory=list)

"""Schemas for board search results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.board import CategoryRead, ChannelRead
from app.schemas.messages import MessageRead


class SearchResults(BaseModel):
    messages: list[MessageRead] = Field(default_factory=list)
    channels: list[ChannelRead] = Field(default_factory=list)
    categories: list[CategoryRead] = Field(default_factory=list)
    query: str
    total_results: int = 0

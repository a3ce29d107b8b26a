"""Drip domain Pydantic V2 schemas.

Response models only: every drip endpoint takes its inputs from the path.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.enums import UnlockReason


class UnlockedTopicsResponse(BaseModel):
    """Topics a student can open today.

    ``reason`` is ``OK`` when drip applied; any other value means the
    engine fell back to unlocking everything (or the course is empty).
    """

    unlocked_topic_ids: list[UUID] = Field(description="Unlocked topics, in course order.")
    unlocked_count: int = Field(ge=0, description="Working days elapsed since the reference date.")
    reason: UnlockReason
    reference_date: date | None = Field(
        default=None,
        description="Day the drip clock started (batch start or enrollment). Only set when reason is OK.",
    )
    total_topics: int = Field(ge=0)


class TopicAccessResponse(BaseModel):
    topic_id: UUID
    course_id: UUID
    unlocked: bool
    unlock_order: int | None = None
    reason: UnlockReason


class DripStatusResponse(BaseModel):
    course_id: UUID
    enabled: bool = Field(description="True when any topic of the course carries an unlock order.")
    total_topics: int
    numbered_topics: int


class UnlockOrderResponse(BaseModel):
    course_id: UUID
    enabled: bool
    topics_updated: int
    message: str

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, SmallInteger, String
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base


class Topic(Base):
    __tablename__ = "topics"

    topic_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    module_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("course_modules.module_id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    # Position inside the module
    sort_order: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    # Course-global drip index (1..N); NULL on every topic means drip is off.
    # Only ever written in bulk by the unlock-order assigner.
    unlock_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    module = relationship("CourseModule", back_populates="topics", lazy="select")

    __table_args__ = (
        CheckConstraint("unlock_order IS NULL OR unlock_order > 0", name="ck_topics_unlock_order_positive"),
        Index("ix_topics_module_id", "module_id"),
    )

import uuid
from datetime import datetime, timezone

from sqlalchemy import Index, String
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base


class Course(Base):
    """Read-side projection of a course; owned by the course catalog."""

    __tablename__ = "courses"

    course_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    modules = relationship("CourseModule", back_populates="course", lazy="noload")
    batches = relationship("Batch", back_populates="course", lazy="noload")

    __table_args__ = (
        Index("ix_courses_created_at", "created_at"),
    )

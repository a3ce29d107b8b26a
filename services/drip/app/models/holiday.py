import datetime as dt
import uuid
from datetime import datetime, timezone

from sqlalchemy import Date, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base


class Holiday(Base):
    """A calendar day excluded from drip progression for every course."""

    __tablename__ = "holidays"

    holiday_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Stored as a UTC calendar day; time-of-day is dropped on the way in
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("date", name="uq_holidays_date"),
    )

"""Enrollment directory — which batch a student follows for a course."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enrollment import BatchEnrollment
from app.models.enums import EnrollmentStatus


async def get_active_enrollment(
    db: AsyncSession, student_id: UUID, course_id: UUID,
) -> BatchEnrollment | None:
    """Return the student's active enrollment with its batch loaded, or None.

    The (student_id, course_id) unique constraint guarantees at most one row.
    """
    stmt = (
        select(BatchEnrollment)
        .options(selectinload(BatchEnrollment.batch))
        .where(
            BatchEnrollment.student_id == student_id,
            BatchEnrollment.course_id == course_id,
            BatchEnrollment.status == EnrollmentStatus.ACTIVE,
        )
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()

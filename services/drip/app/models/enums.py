import enum

from sqlalchemy import Enum as SqlEnum


class BatchStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    UPCOMING = "UPCOMING"
    COMPLETED = "COMPLETED"


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"


class UnlockReason(str, enum.Enum):
    """Why a student sees the topics they see. Not persisted."""

    OK = "OK"
    EMPTY_COURSE = "EMPTY_COURSE"
    NO_DRIP_CONFIGURED = "NO_DRIP_CONFIGURED"
    NO_BATCH = "NO_BATCH"


# Native ENUM on PostgreSQL, VARCHAR + CHECK elsewhere (SQLite in tests)
batch_status_enum = SqlEnum(BatchStatus, name="batch_status")
enrollment_status_enum = SqlEnum(EnrollmentStatus, name="batch_enrollment_status")

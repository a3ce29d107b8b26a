"""Domain exception classes for the drip service.

These are raised by service-layer code and caught by controllers
to map to appropriate HTTP responses. Fail-open outcomes such as
"no drip configured" or "no batch" are results, never exceptions.
"""


class CourseNotFoundError(Exception):
    """Raised when a course cannot be found by ID."""

    def __init__(self, course_id: str = ""):
        self.course_id = course_id
        super().__init__(f"Course not found: {course_id}")


class TopicNotFoundError(Exception):
    def __init__(self, topic_id: str = ""):
        self.topic_id = topic_id
        super().__init__(f"Topic not found: {topic_id}")


class HolidayNotFoundError(Exception):
    def __init__(self, holiday_id: str = ""):
        self.holiday_id = holiday_id
        super().__init__(f"Holiday not found: {holiday_id}")


class InvalidDateError(Exception):
    """Raised when a date value cannot be interpreted as a calendar day."""

    def __init__(self, value: object = None):
        self.value = value
        super().__init__(f"Invalid date: {value!r}")


class TopicLockedError(Exception):
    """Raised when a student requests a topic that drip has not released yet."""

    def __init__(self, topic_id: str = "", unlock_order: int | None = None):
        self.topic_id = topic_id
        self.unlock_order = unlock_order
        super().__init__(f"Topic is not unlocked yet: {topic_id}")


class UnlockOrderPersistenceError(Exception):
    """Raised when the bulk unlock-order write for a course fails.

    The surrounding transaction is rolled back, so the course keeps
    its previous numbering in full.
    """

    def __init__(self, course_id: str = ""):
        self.course_id = course_id
        super().__init__(f"Unlock order update failed for course: {course_id}")

# Import all models so Alembic can discover them via Base.metadata
from .batch import Batch
from .course import Course
from .course_module import CourseModule
from .enrollment import BatchEnrollment
from .holiday import Holiday
from .topic import Topic

__all__ = [
    "Batch",
    "BatchEnrollment",
    "Course",
    "CourseModule",
    "Holiday",
    "Topic",
]

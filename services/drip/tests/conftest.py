from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401 - register with Base
from app.models.batch import Batch
from app.models.course import Course
from app.models.course_module import CourseModule
from app.models.enrollment import BatchEnrollment
from app.models.enums import EnrollmentStatus
from app.models.topic import Topic
from shared.database.postgres import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeRedis:
    """In-memory stand-in for the handful of Redis commands the holiday cache uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.calls: list[str] = []

    async def get(self, key: str) -> str | None:
        self.calls.append("get")
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.calls.append("setex")
        self.store[key] = value
        self.ttls[key] = ttl

    async def incr(self, key: str) -> int:
        self.calls.append("incr")
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    async def delete(self, key: str) -> int:
        self.calls.append("delete")
        return 1 if self.store.pop(key, None) is not None else 0


class BrokenRedis:
    """Every command fails the way an unreachable Redis does."""

    async def get(self, key: str) -> str | None:
        raise ConnectionError("redis down")

    async def setex(self, key: str, ttl: int, value: str) -> None:
        raise ConnectionError("redis down")

    async def incr(self, key: str) -> int:
        raise ConnectionError("redis down")

    async def delete(self, key: str) -> int:
        raise ConnectionError("redis down")


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def broken_redis() -> BrokenRedis:
    return BrokenRedis()


@pytest_asyncio.fixture
async def course(db_session: AsyncSession) -> Course:
    course = Course(title="Full Stack Development")
    db_session.add(course)
    await db_session.flush()
    return course


@pytest_asyncio.fixture
async def course_topics(db_session: AsyncSession, course: Course) -> list[Topic]:
    """Five topics over two modules, returned in course order.

    Rows are inserted out of order so tests exercise the ordering queries.
    """
    second = CourseModule(course_id=course.course_id, title="Backend", sort_order=2)
    first = CourseModule(course_id=course.course_id, title="Frontend", sort_order=1)
    db_session.add_all([second, first])
    await db_session.flush()

    topics = {
        "html": Topic(module_id=first.module_id, title="HTML", sort_order=1),
        "css": Topic(module_id=first.module_id, title="CSS", sort_order=2),
        "js": Topic(module_id=first.module_id, title="JavaScript", sort_order=3),
        "node": Topic(module_id=second.module_id, title="Node", sort_order=1),
        "sql": Topic(module_id=second.module_id, title="SQL", sort_order=2),
    }
    db_session.add_all([topics["sql"], topics["js"], topics["node"], topics["html"], topics["css"]])
    await db_session.flush()
    return [topics["html"], topics["css"], topics["js"], topics["node"], topics["sql"]]


EnrollFactory = Callable[..., Awaitable[BatchEnrollment]]


@pytest_asyncio.fixture
async def enroll(db_session: AsyncSession, course: Course) -> EnrollFactory:
    """Put a student into a new batch of ``course``."""

    async def _enroll(
        student_id: UUID | None = None,
        *,
        enrolled_on: datetime | date = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc),
        batch_start: date = date(2024, 1, 1),
        status: EnrollmentStatus = EnrollmentStatus.ACTIVE,
    ) -> BatchEnrollment:
        batch = Batch(
            course_id=course.course_id,
            name=f"Batch {batch_start.isoformat()}",
            start_date=batch_start,
            end_date=date(batch_start.year + 1, batch_start.month, 1),
        )
        db_session.add(batch)
        await db_session.flush()
        if not isinstance(enrolled_on, datetime):
            enrolled_on = datetime(
                enrolled_on.year, enrolled_on.month, enrolled_on.day, tzinfo=timezone.utc,
            )
        enrollment = BatchEnrollment(
            student_id=student_id or uuid4(),
            course_id=course.course_id,
            batch_id=batch.batch_id,
            batch=batch,
            enrollment_date=enrolled_on,
            status=status,
        )
        db_session.add(enrollment)
        await db_session.flush()
        return enrollment

    return _enroll

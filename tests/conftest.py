# tests/conftest.py
"""
Shared fixtures: a throwaway SQLite database per test, the in-process app
behind an httpx.AsyncClient, and small row factories.

Async tests opt in with ``pytestmark = pytest.mark.anyio``.
"""
from __future__ import annotations

import logging
import os
import sys
from decimal import Decimal

# Must be set before ADMS.core.config builds its settings
os.environ.setdefault("ADMS_TESTING", "1")

import pytest
from httpx import ASGITransport, AsyncClient

from ADMS.db.base import new_id
from ADMS.db.models import (
    Attendance,
    ClassSession,
    Course,
    Department,
    DepartmentMember,
    DepartmentRole,
    Field,
    LessonRoster,
    Mark,
    StudentLessonRoster,
    User,
    UserRole,
)
from ADMS.db.session import Database
from ADMS.main import create_app
from ADMS.utils.slugs import slugify


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    """
    Ensure test logs go to stdout so they show up under pytest -s or log_cli=true.
    Avoid duplicates if handler is already present.
    """
    root = logging.getLogger()
    want = None
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout:
            want = h
            break
    if want is None:
        want = logging.StreamHandler(sys.stdout)
        want.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(want)

    # Let the user override via TEST_LOG_LEVEL=DEBUG/INFO/WARNING...
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())
    yield
    root.removeHandler(want)


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==============================================================
# Storage
# ==============================================================

@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'adms-test.db'}"


@pytest.fixture
async def database(database_url):
    db = Database(database_url, nullpool=True)
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as s:
        yield s


# ==============================================================
# App / client
# ==============================================================

@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ==============================================================
# Row factories
# ==============================================================

@pytest.fixture
def make_user(database):
    async def _make(role: UserRole = UserRole.LECTURER, name: str = "Ada Lovelace") -> User:
        async with database.session() as s:
            user = User(name=name, email=f"{new_id()}@example.edu", role=role)
            s.add(user)
            await s.commit()
            return user
    return _make


@pytest.fixture
def make_department(database):
    async def _make(name: str = "Mathematics", slug: str | None = None) -> Department:
        async with database.session() as s:
            department = Department(name=name, slug=slug or f"{slugify(name)}-{new_id()[:8]}")
            s.add(department)
            await s.commit()
            await s.refresh(department)
            return department
    return _make


@pytest.fixture
def make_course(database):
    async def _make(department: Department, name: str = "Algebra I") -> Course:
        async with database.session() as s:
            course = Course(department_id=department.id, name=name, slug=f"course-{new_id()}")
            s.add(course)
            await s.commit()
            return course
    return _make


@pytest.fixture
def add_member(database):
    async def _add(user: User, department: Department,
                   role: DepartmentRole = DepartmentRole.LECTURER) -> DepartmentMember:
        async with database.session() as s:
            member = DepartmentMember(user_id=user.id, department_id=department.id, role=role)
            s.add(member)
            await s.commit()
            return member
    return _add


@pytest.fixture
def build_course_tree(database, make_course):
    """
    A course with every dependent row type under it: a field with a mark,
    a roster with an enrolled student, a session and an attendance record.
    """
    async def _build(department: Department, student: User, lecturer: User) -> dict[str, str]:
        course = await make_course(department)
        async with database.session() as s:
            field = Field(course_id=course.id, name="midterm")
            roster = LessonRoster(course_id=course.id, creator_id=lecturer.id,
                                  slug=f"roster-{new_id()}", name="Group A")
            s.add_all([field, roster])
            await s.flush()

            class_session = ClassSession(lesson_roster_id=roster.id, name="Week 1")
            s.add_all([
                class_session,
                Mark(field_id=field.id, student_id=student.id, amount=Decimal("87.50")),
                StudentLessonRoster(student_id=student.id, lesson_roster_id=roster.id),
            ])
            await s.flush()

            attendance = Attendance(student_id=student.id, session_id=class_session.id)
            s.add(attendance)
            await s.commit()
            return {
                "course": course.id,
                "field": field.id,
                "roster": roster.id,
                "session": class_session.id,
                "attendance": attendance.id,
            }
    return _build

# tests/test_seeders.py
from __future__ import annotations

import logging
import random

import pytest
import sqlalchemy as sa
from faker import Faker

import ADMS.seeds.users as users_seed
from ADMS.db.models import Course, Department, User, UserRole
from ADMS.seeds.courses import seed_courses
from ADMS.seeds.departments import seed_departments
from ADMS.seeds.users import seed_users

pytestmark = pytest.mark.anyio


@pytest.fixture
def faker():
    f = Faker()
    f.seed_instance(1234)
    return f


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

async def test_seed_users_inserts_in_batches(session, faker, caplog):
    caplog.set_level(logging.INFO, logger="ADMS")

    inserted = await seed_users(session, 25, batch_size=10, faker=faker)
    assert inserted == 25

    users = list(await session.scalars(sa.select(User)))
    assert len(users) == 25
    assert len({u.email for u in users}) == 25
    assert {u.role for u in users} <= set(UserRole)

    batch_lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Batch inserted")]
    assert batch_lines == [
        "Batch inserted: 10 users (Total: 10/25)",
        "Batch inserted: 10 users (Total: 20/25)",
        "Batch inserted: 5 users (Total: 25/25)",
    ]
    assert any("Seeding complete: 25 users" in r.getMessage() for r in caplog.records)


async def test_seed_users_replaces_existing_rows(session, make_user, faker):
    survivor_candidate = await make_user(name="Old Timer")

    await seed_users(session, 3, batch_size=2, faker=faker)

    ids = set(await session.scalars(sa.select(User.id)))
    assert len(ids) == 3
    assert survivor_candidate.id not in ids


async def test_seed_users_zero_count_empties_the_table(session, make_user, faker):
    await make_user()
    assert await seed_users(session, 0, faker=faker) == 0
    assert await session.scalar(sa.select(sa.func.count()).select_from(User)) == 0


async def test_seed_users_keeps_committed_batches_on_failure(session, faker, monkeypatch):
    real_build = users_seed.build_user

    def failing_build(f, index, roles):
        if index >= 10:
            raise RuntimeError("generator exploded")
        return real_build(f, index, roles)

    monkeypatch.setattr(users_seed, "build_user", failing_build)

    with pytest.raises(RuntimeError):
        await seed_users(session, 30, batch_size=10, faker=faker)

    assert await session.scalar(sa.select(sa.func.count()).select_from(User)) == 10


# ---------------------------------------------------------------------------
# Departments
# ---------------------------------------------------------------------------

async def test_seed_departments_replaces_existing(session, make_department, faker):
    old = await make_department("Legacy")

    departments = await seed_departments(session, 4, faker=faker, rng=random.Random(1))
    assert len(departments) == 4
    assert all(d.name.endswith(" Studies") for d in departments)
    assert len({d.slug for d in departments}) == 4

    ids = set(await session.scalars(sa.select(Department.id)))
    assert ids == {d.id for d in departments}
    assert old.id not in ids


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------

async def test_seed_courses_without_departments_does_nothing(session, faker, caplog):
    caplog.set_level(logging.INFO, logger="ADMS")

    assert await seed_courses(session, 10, faker=faker) == []
    assert await session.scalar(sa.select(sa.func.count()).select_from(Course)) == 0
    assert "No departments found. Please seed departments first." in caplog.text


async def test_seed_courses_spreads_over_existing_departments(session, make_department, faker, caplog):
    caplog.set_level(logging.INFO, logger="ADMS")
    departments = [await make_department(n) for n in ("Math", "Art", "Law")]

    courses = await seed_courses(session, 30, faker=faker, rng=random.Random(7))
    assert len(courses) == 30
    assert len({c.slug for c in courses}) == 30
    assert {c.department_id for c in courses} <= {d.id for d in departments}
    assert all(c.description for c in courses)
    assert "30 new courses seeded!" in caplog.text


async def test_seed_courses_replaces_previous_courses(session, make_department, make_course, faker):
    department = await make_department()
    stale = await make_course(department, "Stale")

    await seed_courses(session, 5, faker=faker)

    ids = set(await session.scalars(sa.select(Course.id)))
    assert len(ids) == 5
    assert stale.id not in ids


async def test_seeded_data_shows_up_in_department_counts(session, client, faker):
    await seed_departments(session, 5, faker=faker)
    await seed_courses(session, 50, faker=faker)

    r = await client.get("/departments")
    assert r.status_code == 200
    rows = r.json()["data"]
    assert len(rows) == 5
    assert sum(row["coursesCount"] for row in rows) == 50

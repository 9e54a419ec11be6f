from __future__ import annotations

import random

from faker import Faker
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ADMS.app_logger import get_logger
from ADMS.core.config import settings
from ADMS.db.models import Course, Department
from ADMS.utils.slugs import generate_unique_slug

log = get_logger("seeds.courses")


async def seed_courses(
    session: AsyncSession,
    count: int,
    *,
    faker: Faker | None = None,
    rng: random.Random | None = None,
) -> list[Course]:
    """
    Replace every course with ``count`` synthetic ones spread over existing departments.

    Without departments nothing is inserted: the notice is logged and an
    empty list returned. All rows go in with a single bulk INSERT.
    """
    faker = faker or Faker()
    rng = rng or random.Random()

    await session.execute(sa.delete(Course))
    await session.commit()

    # one query for every department id instead of one per course
    department_ids = list(await session.scalars(sa.select(Department.id)))
    if not department_ids:
        log.info("No departments found. Please seed departments first.")
        return []

    existing_slugs: set[str] = set()
    courses_data = []
    for _ in range(count):
        slug, name = generate_unique_slug(
            existing_slugs,
            faker.catch_phrase,
            prefix="course",
            max_attempts=settings.SLUG_MAX_ATTEMPTS,
            rng=rng,
        )
        courses_data.append(
            {
                "name": name,
                "slug": slug,
                "department_id": rng.choice(department_ids),
                "description": faker.paragraph(),
            }
        )

    if not courses_data:
        log.info("0 new courses seeded!")
        return []

    courses = list(await session.scalars(sa.insert(Course).returning(Course), courses_data))
    await session.commit()
    log.info("%d new courses seeded!", len(courses))
    return courses

from __future__ import annotations

import random

from faker import Faker
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ADMS.app_logger import get_logger
from ADMS.core.config import settings
from ADMS.db.models import Department
from ADMS.utils.slugs import capitalize_first_letter, generate_unique_slug

log = get_logger("seeds.departments")


def department_name(faker: Faker) -> str:
    return f"{capitalize_first_letter(faker.word())} Studies"


async def seed_departments(
    session: AsyncSession,
    count: int,
    *,
    faker: Faker | None = None,
    rng: random.Random | None = None,
) -> list[Department]:
    """Replace every department (cascading to courses and memberships) with ``count`` new ones."""
    faker = faker or Faker()

    await session.execute(sa.delete(Department))
    await session.commit()

    if count <= 0:
        log.info("0 new departments seeded!")
        return []

    existing_slugs: set[str] = set()
    rows = []
    for _ in range(count):
        slug, name = generate_unique_slug(
            existing_slugs,
            lambda: department_name(faker),
            prefix="department",
            max_attempts=settings.SLUG_MAX_ATTEMPTS,
            rng=rng,
        )
        rows.append({"name": name, "slug": slug})

    departments = list(await session.scalars(sa.insert(Department).returning(Department), rows))
    await session.commit()
    log.info("%d new departments seeded!", len(departments))
    return departments

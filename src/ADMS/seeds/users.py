from __future__ import annotations

from faker import Faker
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ADMS.app_logger import get_logger
from ADMS.core.config import settings
from ADMS.db.models import User, UserRole

log = get_logger("seeds.users")


def valid_roles() -> list[UserRole]:
    return list(UserRole)


def build_user(faker: Faker, index: int, roles: list[UserRole]) -> dict:
    return {
        "name": faker.name(),
        # index prefix keeps emails unique under the column constraint
        "email": f"{index}{faker.email()}",
        "email_verified": faker.date_time_between(start_date="-1d", end_date="now"),
        "password_hash": faker.password(),
        "role": faker.random_element(roles),
        "image": faker.image_url(),
    }


async def seed_users(
    session: AsyncSession,
    count: int,
    *,
    batch_size: int | None = None,
    faker: Faker | None = None,
) -> int:
    """
    Replace every user with ``count`` synthetic ones.

    Destructive: all existing users (and their dependent rows) are deleted first.
    Each batch is committed on its own, so a failure leaves earlier batches in place.
    Returns the number of users inserted.
    """
    batch_size = batch_size or settings.SEED_BATCH_SIZE
    faker = faker or Faker()

    await session.execute(sa.delete(User))
    await session.commit()

    roles = valid_roles()

    total_inserted = 0
    while total_inserted < count:
        current_batch_size = min(batch_size, count - total_inserted)
        users = [
            build_user(faker, total_inserted + idx, roles)
            for idx in range(current_batch_size)
        ]

        await session.execute(sa.insert(User), users)
        await session.commit()

        total_inserted += current_batch_size
        log.info(
            "Batch inserted: %d users (Total: %d/%d)",
            current_batch_size, total_inserted, count,
        )

    log.info(
        "Seeding complete: %d users inserted in batches of %d",
        total_inserted, batch_size,
    )
    return total_inserted

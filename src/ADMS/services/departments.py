# src/ADMS/services/departments.py
"""
Query/mutation layer behind the /departments routes.

Single-row operations run in one session. Bulk operations fan out with
``asyncio.gather``, one session (and transaction) per item, and report a
per-item outcome instead of failing as a whole.
"""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Iterable, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ADMS.app_logger import get_logger
from ADMS.db.models import Course, Department, DepartmentMember, DepartmentRole
from ADMS.db.session import Database
from ADMS.exceptions import ConflictError, NotFoundError
from ADMS.schemas.department import BulkFailure, BulkResult, BulkSuccess, MemberKey
from ADMS.utils.slugs import capitalize_first_letter, resolve_unique_slug, slugify

log = get_logger("services.departments")

GENERIC_FAILURE = "Internal Server Error"


def _role_count(role: DepartmentRole):
    return (
        sa.select(sa.func.count())
        .select_from(DepartmentMember)
        .where(
            DepartmentMember.department_id == Department.id,
            DepartmentMember.role == role,
        )
        .correlate(Department)
        .scalar_subquery()
    )


async def slug_taken(session: AsyncSession, slug: str) -> bool:
    found = await session.scalar(
        sa.select(Department.id).where(Department.slug == slug).limit(1)
    )
    return found is not None


async def _gather_outcomes(keys: Sequence[Any], calls: Iterable[Awaitable[int]], action: str) -> BulkResult:
    outcomes = await asyncio.gather(*calls, return_exceptions=True)
    result = BulkResult()
    for key, outcome in zip(keys, outcomes):
        if isinstance(outcome, BaseException):
            log.error("%s failed for %r", action, key, exc_info=outcome)
            result.failed.append(BulkFailure(id=key, reason=GENERIC_FAILURE))
        else:
            result.succeeded.append(BulkSuccess(id=key, affected=outcome))
    return result


class DepartmentService:
    def __init__(self, database: Database):
        self.database = database

    # -------------------------
    # Reads
    # -------------------------
    async def list_with_counts(self) -> list[dict]:
        stmt = (
            sa.select(
                Department.id,
                Department.name,
                Department.slug,
                Department.created_at,
                Department.updated_at,
                _role_count(DepartmentRole.LEADER).label("leaders_count"),
                _role_count(DepartmentRole.LECTURER).label("lecturers_count"),
                sa.func.count(sa.distinct(Course.id)).label("courses_count"),
            )
            .select_from(Department)
            .outerjoin(Course, Course.department_id == Department.id)
            .group_by(
                Department.id,
                Department.name,
                Department.slug,
                Department.created_at,
                Department.updated_at,
            )
            .order_by(Department.name, Department.id)
        )
        async with self.database.session() as session:
            rows = (await session.execute(stmt)).mappings().all()
        return [dict(row) for row in rows]

    async def get_by_slug(self, slug: str) -> Department:
        stmt = (
            sa.select(Department)
            .where(Department.slug == slug)
            .options(
                selectinload(Department.members).selectinload(DepartmentMember.user),
                selectinload(Department.courses),
            )
        )
        async with self.database.session() as session:
            department = (await session.execute(stmt)).scalar_one_or_none()
        if department is None:
            raise NotFoundError("Department", slug)
        return department

    # -------------------------
    # Writes
    # -------------------------
    async def create(self, name: str) -> Department:
        async with self.database.session() as session:
            slug = await resolve_unique_slug(
                slugify(name), lambda candidate: slug_taken(session, candidate)
            )
            department = Department(name=capitalize_first_letter(name), slug=slug)
            session.add(department)
            await session.commit()
            await session.refresh(department)
        log.info("created department %s (%s)", department.slug, department.id)
        return department

    async def update_by_slug(self, slug: str, name: str) -> int:
        """Rename the department; created_at is left untouched. Returns rows affected."""
        stmt = (
            sa.update(Department)
            .where(Department.slug == slug)
            .values(name=capitalize_first_letter(name), updated_at=sa.func.now())
            .execution_options(synchronize_session=False)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            await session.commit()
        if not result.rowcount:
            log.info("update matched no department for slug %r", slug)
        return result.rowcount

    async def _delete_one(self, department_id: str) -> int:
        async with self.database.session() as session:
            result = await session.execute(
                sa.delete(Department)
                .where(Department.id == department_id)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount

    async def delete_many(self, ids: Sequence[str]) -> BulkResult:
        return await _gather_outcomes(ids, (self._delete_one(i) for i in ids), "delete department")

    # -------------------------
    # Membership
    # -------------------------
    async def add_member(self, user_id: str, department_id: str, role: DepartmentRole) -> DepartmentMember:
        async with self.database.session() as session:
            if await session.get(DepartmentMember, (user_id, department_id)) is not None:
                raise ConflictError("User is already a member of this department")
            member = DepartmentMember(user_id=user_id, department_id=department_id, role=role)
            session.add(member)
            await session.commit()
            await session.refresh(member, attribute_names=["user"])
        log.info("added %s to department %s as %s", user_id, department_id, role.value)
        return member

    async def _remove_one(self, key: MemberKey) -> int:
        async with self.database.session() as session:
            result = await session.execute(
                sa.delete(DepartmentMember)
                .where(
                    DepartmentMember.user_id == key.user_id,
                    DepartmentMember.department_id == key.department_id,
                )
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount

    async def remove_members(self, keys: Sequence[MemberKey]) -> BulkResult:
        return await _gather_outcomes(keys, (self._remove_one(k) for k in keys), "remove member")

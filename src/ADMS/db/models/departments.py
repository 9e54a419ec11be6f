from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ADMS.db.base import Base, IDMixin, TimestampMixin, fk
from ADMS.db.models.enums import DepartmentRole, department_role_enum


class Department(IDMixin, TimestampMixin, Base):
    __tablename__ = "departments"

    __table_args__ = {
        "comment": (
            "Academic departments. Owns courses and role-qualified memberships; "
            "slug is derived from name and unique."
        )
    }

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    slug: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)

    members: Mapped[list["DepartmentMember"]] = relationship(
        "DepartmentMember",
        back_populates="department",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    courses: Mapped[list["Course"]] = relationship(
        "Course",
        back_populates="department",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Course.created_at",
    )

    def __repr__(self) -> str:
        return f"Department(id={self.id!r}, slug={self.slug!r})"


class DepartmentMember(Base):
    """A user's role within one department (separate from User.role)."""
    __tablename__ = "user_to_department"

    # Composite primary key: a user holds at most one role per department
    __table_args__ = {"comment": "Role-qualified User<->Department membership; one row per pairing."}

    user_id: Mapped[str] = mapped_column(sa.String(255), fk("users.id"), primary_key=True)
    department_id: Mapped[str] = mapped_column(
        sa.String(255), fk("departments.id"), primary_key=True, index=True
    )
    role: Mapped[DepartmentRole] = mapped_column(
        department_role_enum, nullable=False, default=DepartmentRole.LECTURER
    )

    user: Mapped["User"] = relationship("User", back_populates="memberships")
    department: Mapped["Department"] = relationship("Department", back_populates="members")

    def __repr__(self) -> str:
        return (
            f"DepartmentMember(user_id={self.user_id!r}, "
            f"department_id={self.department_id!r}, role={self.role!r})"
        )

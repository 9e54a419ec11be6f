from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ADMS.db.base import Base, IDMixin
from ADMS.db.models.enums import UserRole, user_role_enum


class User(IDMixin, Base):
    __tablename__ = "users"

    __table_args__ = {
        "comment": (
            "Application users. The global role is fixed at creation; "
            "department-scoped roles live in user_to_department."
        )
    }

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(sa.String(255), unique=True, nullable=True)
    email_verified: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    # Stored as provided; hashing is not implemented
    password_hash: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)
    role: Mapped[UserRole] = mapped_column(user_role_enum, nullable=False)
    image: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)

    memberships: Mapped[list["DepartmentMember"]] = relationship(
        "DepartmentMember",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    created_rosters: Mapped[list["LessonRoster"]] = relationship(
        "LessonRoster",
        back_populates="creator",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    marks: Mapped[list["Mark"]] = relationship(
        "Mark",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    attendance: Mapped[list["Attendance"]] = relationship(
        "Attendance",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, role={self.role!r})"

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ADMS.db.base import Base, IDMixin, TimestampMixin, fk


class Course(IDMixin, TimestampMixin, Base):
    __tablename__ = "courses"

    __table_args__ = {
        "comment": "Courses offered by a department; deleted with their department."
    }

    department_id: Mapped[str] = mapped_column(
        sa.String(255), fk("departments.id"), nullable=False, index=True
    )
    name: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)
    slug: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)

    department: Mapped["Department"] = relationship("Department", back_populates="courses")
    fields: Mapped[list["Field"]] = relationship(
        "Field",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    lesson_rosters: Mapped[list["LessonRoster"]] = relationship(
        "LessonRoster",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Course(id={self.id!r}, slug={self.slug!r})"


class Field(IDMixin, Base):
    """Named grading category of a course, e.g. "midterm"."""
    __tablename__ = "fields"

    course_id: Mapped[str] = mapped_column(sa.String(255), fk("courses.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)

    course: Mapped["Course"] = relationship("Course", back_populates="fields")
    marks: Mapped[list["Mark"]] = relationship(
        "Mark",
        back_populates="field",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Mark(IDMixin, Base):
    __tablename__ = "marks"

    field_id: Mapped[str] = mapped_column(sa.String(255), fk("fields.id"), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(sa.String(255), fk("users.id"), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), nullable=False)

    field: Mapped["Field"] = relationship("Field", back_populates="marks")
    student: Mapped["User"] = relationship("User", back_populates="marks")

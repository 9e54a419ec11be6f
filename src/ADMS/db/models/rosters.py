from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ADMS.db.base import Base, IDMixin, TimestampMixin, fk
from ADMS.db.models.enums import AttendanceStatus, attendance_status_enum


class LessonRoster(IDMixin, TimestampMixin, Base):
    __tablename__ = "lesson_rosters"

    __table_args__ = {
        "comment": "A course's class list: owns sessions and enrolls students."
    }

    course_id: Mapped[str] = mapped_column(sa.String(255), fk("courses.id"), nullable=False, index=True)
    creator_id: Mapped[str] = mapped_column(sa.String(255), fk("users.id"), nullable=False, index=True)
    name: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)
    slug: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)

    course: Mapped["Course"] = relationship("Course", back_populates="lesson_rosters")
    creator: Mapped["User"] = relationship("User", back_populates="created_rosters")
    sessions: Mapped[list["ClassSession"]] = relationship(
        "ClassSession",
        back_populates="lesson_roster",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    enrollments: Mapped[list["StudentLessonRoster"]] = relationship(
        "StudentLessonRoster",
        back_populates="lesson_roster",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class StudentLessonRoster(Base):
    """Plain student enrollment in a roster; composite key forbids duplicates."""
    __tablename__ = "student_to_lesson_roster"

    student_id: Mapped[str] = mapped_column(sa.String(255), fk("users.id"), primary_key=True)
    lesson_roster_id: Mapped[str] = mapped_column(
        sa.String(255), fk("lesson_rosters.id"), primary_key=True, index=True
    )

    student: Mapped["User"] = relationship("User")
    lesson_roster: Mapped["LessonRoster"] = relationship("LessonRoster", back_populates="enrollments")


class ClassSession(IDMixin, Base):
    """One named meeting of a lesson roster."""
    __tablename__ = "sessions"

    lesson_roster_id: Mapped[str] = mapped_column(
        sa.String(255), fk("lesson_rosters.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)

    lesson_roster: Mapped["LessonRoster"] = relationship("LessonRoster", back_populates="sessions")
    attendance: Mapped[list["Attendance"]] = relationship(
        "Attendance",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Attendance(IDMixin, Base):
    __tablename__ = "attendance"

    student_id: Mapped[str] = mapped_column(sa.String(255), fk("users.id"), nullable=False, index=True)
    session_id: Mapped[str] = mapped_column(sa.String(255), fk("sessions.id"), nullable=False, index=True)
    status: Mapped[AttendanceStatus] = mapped_column(
        attendance_status_enum,
        nullable=False,
        default=AttendanceStatus.PRESENT,
        server_default=AttendanceStatus.PRESENT.value,
    )

    student: Mapped["User"] = relationship("User", back_populates="attendance")
    session: Mapped["ClassSession"] = relationship("ClassSession", back_populates="attendance")

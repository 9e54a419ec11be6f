"""Initial ADMS schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

Notes
- String (UUID4 text) primary keys generated by the application
- Every foreign key cascades on delete
- Link tables use composite primary keys, so a pairing appears at most once
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ID = sa.String(255)

user_role = sa.Enum("admin", "department_leader", "lecturer", "student", name="user_role")
department_role = sa.Enum("leader", "lecturer", name="department_role")
attendance_status = sa.Enum("present", "absent", "late", "excused", name="attendance_status")
payment_method = sa.Enum("cash", "eft", "payment_gateway", name="payment_method")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _fk(column: str, target: str, **kw) -> sa.Column:
    return sa.Column(column, ID, sa.ForeignKey(target, ondelete="CASCADE"), **kw)


def upgrade() -> None:
    # not referenced by any table yet; created so the closed set exists in the schema
    payment_method.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", ID, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("email_verified", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "departments",
        sa.Column("id", ID, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_departments_slug"),
    )

    op.create_table(
        "user_to_department",
        _fk("user_id", "users.id", primary_key=True),
        _fk("department_id", "departments.id", primary_key=True),
        sa.Column("role", department_role, nullable=False),
    )
    op.create_index("ix_user_to_department_department_id", "user_to_department", ["department_id"])

    op.create_table(
        "courses",
        sa.Column("id", ID, primary_key=True),
        _fk("department_id", "departments.id", nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_courses_slug"),
    )
    op.create_index("ix_courses_department_id", "courses", ["department_id"])

    op.create_table(
        "fields",
        sa.Column("id", ID, primary_key=True),
        _fk("course_id", "courses.id", nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_index("ix_fields_course_id", "fields", ["course_id"])

    op.create_table(
        "marks",
        sa.Column("id", ID, primary_key=True),
        _fk("field_id", "fields.id", nullable=False),
        _fk("student_id", "users.id", nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_marks_field_id", "marks", ["field_id"])
    op.create_index("ix_marks_student_id", "marks", ["student_id"])

    op.create_table(
        "lesson_rosters",
        sa.Column("id", ID, primary_key=True),
        _fk("course_id", "courses.id", nullable=False),
        _fk("creator_id", "users.id", nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("notes", sa.String(255), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_lesson_rosters_slug"),
    )
    op.create_index("ix_lesson_rosters_course_id", "lesson_rosters", ["course_id"])
    op.create_index("ix_lesson_rosters_creator_id", "lesson_rosters", ["creator_id"])

    op.create_table(
        "student_to_lesson_roster",
        _fk("student_id", "users.id", primary_key=True),
        _fk("lesson_roster_id", "lesson_rosters.id", primary_key=True),
    )
    op.create_index(
        "ix_student_to_lesson_roster_lesson_roster_id", "student_to_lesson_roster", ["lesson_roster_id"]
    )

    op.create_table(
        "sessions",
        sa.Column("id", ID, primary_key=True),
        _fk("lesson_roster_id", "lesson_rosters.id", nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_index("ix_sessions_lesson_roster_id", "sessions", ["lesson_roster_id"])

    op.create_table(
        "attendance",
        sa.Column("id", ID, primary_key=True),
        _fk("student_id", "users.id", nullable=False),
        _fk("session_id", "sessions.id", nullable=False),
        sa.Column("status", attendance_status, nullable=False, server_default="present"),
    )
    op.create_index("ix_attendance_student_id", "attendance", ["student_id"])
    op.create_index("ix_attendance_session_id", "attendance", ["session_id"])


def downgrade() -> None:
    for table in (
        "attendance",
        "sessions",
        "student_to_lesson_roster",
        "lesson_rosters",
        "marks",
        "fields",
        "courses",
        "user_to_department",
        "departments",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (attendance_status, department_role, user_role, payment_method):
        enum.drop(bind, checkfirst=True)

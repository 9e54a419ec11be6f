# src/ADMS/db/models/__init__.py
# Importing this package registers every table on Base.metadata.
from ADMS.db.base import Base
from ADMS.db.models.enums import (
    AttendanceStatus,
    DepartmentRole,
    PaymentMethod,
    UserRole,
    payment_method_enum,
)
from ADMS.db.models.users import User
from ADMS.db.models.departments import Department, DepartmentMember
from ADMS.db.models.courses import Course, Field, Mark
from ADMS.db.models.rosters import Attendance, ClassSession, LessonRoster, StudentLessonRoster

__all__ = [
    "Base",
    "AttendanceStatus",
    "DepartmentRole",
    "PaymentMethod",
    "UserRole",
    "payment_method_enum",
    "User",
    "Department",
    "DepartmentMember",
    "Course",
    "Field",
    "Mark",
    "LessonRoster",
    "StudentLessonRoster",
    "ClassSession",
    "Attendance",
]

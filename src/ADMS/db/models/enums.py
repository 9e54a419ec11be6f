from enum import Enum

import sqlalchemy as sa


class UserRole(str, Enum):
    ADMIN = "admin"
    DEPARTMENT_LEADER = "department_leader"
    LECTURER = "lecturer"
    STUDENT = "student"


class DepartmentRole(str, Enum):
    LEADER = "leader"
    LECTURER = "lecturer"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class PaymentMethod(str, Enum):
    CASH = "cash"
    EFT = "eft"
    PAYMENT_GATEWAY = "payment_gateway"


def enum_type(enum_cls: type[Enum], name: str) -> sa.Enum:
    """Named DB enum that stores member values ("present"), not member names."""
    return sa.Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


user_role_enum = enum_type(UserRole, "user_role")
department_role_enum = enum_type(DepartmentRole, "department_role")
attendance_status_enum = enum_type(AttendanceStatus, "attendance_status")
payment_method_enum = enum_type(PaymentMethod, "payment_method")

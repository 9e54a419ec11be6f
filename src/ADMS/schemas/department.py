from __future__ import annotations

from datetime import datetime
from typing import Generic, Optional, TypeVar, Union

from pydantic import Field

from ADMS.db.models.enums import DepartmentRole
from .base import APIModel

T = TypeVar("T")


class DataResponse(APIModel, Generic[T]):
    data: T


# -------------------------
# Requests
# -------------------------
class DepartmentCreate(APIModel):
    name: str = Field(..., min_length=2, max_length=100)


class DepartmentUpdate(DepartmentCreate):
    pass


class DepartmentDelete(APIModel):
    ids: list[str]


class MemberCreate(APIModel):
    user_id: str = Field(..., min_length=1)
    department_id: str = Field(..., min_length=1)
    role: DepartmentRole = DepartmentRole.LECTURER


class MemberKey(APIModel):
    user_id: str
    department_id: str


class MemberRemove(APIModel):
    id_object: list[MemberKey]


# -------------------------
# Responses
# -------------------------
class DepartmentOut(APIModel):
    id: str
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime


class DepartmentSummary(DepartmentOut):
    leaders_count: int
    lecturers_count: int
    courses_count: int


class MemberUser(APIModel):
    id: str
    name: str
    email: Optional[str] = None


class MemberOut(APIModel):
    user_id: str
    department_id: str
    role: DepartmentRole
    user: Optional[MemberUser] = None


class CourseBrief(APIModel):
    id: str
    name: Optional[str] = None
    slug: str
    created_at: datetime


class DepartmentDetail(DepartmentOut):
    members: list[MemberOut] = []
    courses: list[CourseBrief] = []


class UpdateResult(APIModel):
    updated: int


class BulkSuccess(APIModel):
    id: Union[str, MemberKey]
    affected: int


class BulkFailure(APIModel):
    id: Union[str, MemberKey]
    reason: str


class BulkResult(APIModel):
    succeeded: list[BulkSuccess] = []
    failed: list[BulkFailure] = []

    @property
    def ok(self) -> bool:
        return not self.failed

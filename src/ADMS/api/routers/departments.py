# src/ADMS/api/routers/departments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from ADMS.db.session import Database, get_database
from ADMS.exceptions import ConflictError, NotFoundError
from ADMS.schemas.department import (
    BulkResult,
    DataResponse,
    DepartmentCreate,
    DepartmentDelete,
    DepartmentDetail,
    DepartmentOut,
    DepartmentSummary,
    DepartmentUpdate,
    MemberCreate,
    MemberOut,
    MemberRemove,
    UpdateResult,
)
from ADMS.services.departments import DepartmentService

router = APIRouter(prefix="/departments", tags=["departments"])


def get_service(database: Database = Depends(get_database)) -> DepartmentService:
    return DepartmentService(database)


def _multi_status(result: BulkResult) -> JSONResponse:
    """200 when every item succeeded, 207 otherwise."""
    body = DataResponse[BulkResult](data=result).model_dump(mode="json", by_alias=True)
    code = status.HTTP_200_OK if result.ok else status.HTTP_207_MULTI_STATUS
    return JSONResponse(body, status_code=code)


# -------------------------
# Departments
# -------------------------
@router.get("", response_model=DataResponse[list[DepartmentSummary]])
async def list_departments(service: DepartmentService = Depends(get_service)):
    """All departments with leader, lecturer and course counts."""
    return {"data": await service.list_with_counts()}


@router.patch(
    "",
    response_model=DataResponse[BulkResult],
    responses={207: {"model": DataResponse[BulkResult]}},
)
async def delete_departments(payload: DepartmentDelete, service: DepartmentService = Depends(get_service)):
    return _multi_status(await service.delete_many(payload.ids))


@router.post("", response_model=DataResponse[DepartmentOut], status_code=status.HTTP_201_CREATED)
async def create_department(payload: DepartmentCreate, service: DepartmentService = Depends(get_service)):
    return {"data": await service.create(payload.name)}


# -------------------------
# Membership (declared before /{slug} so "members" is not taken as a slug)
# -------------------------
@router.post("/members", response_model=DataResponse[MemberOut])
async def add_member(payload: MemberCreate, service: DepartmentService = Depends(get_service)):
    try:
        member = await service.add_member(payload.user_id, payload.department_id, payload.role)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return {"data": member}


@router.patch(
    "/members",
    response_model=DataResponse[BulkResult],
    responses={207: {"model": DataResponse[BulkResult]}},
)
async def remove_members(payload: MemberRemove, service: DepartmentService = Depends(get_service)):
    return _multi_status(await service.remove_members(payload.id_object))


# -------------------------
# Single department by slug
# -------------------------
@router.get("/{slug}", response_model=DataResponse[DepartmentDetail])
async def get_department(slug: str, service: DepartmentService = Depends(get_service)):
    try:
        department = await service.get_by_slug(slug)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found") from e
    return {"data": department}


@router.put("/{slug}", response_model=DataResponse[UpdateResult])
async def update_department(
    slug: str,
    payload: DepartmentUpdate,
    service: DepartmentService = Depends(get_service),
):
    """Unknown slugs are not an error: the body reports ``updated: 0``."""
    return {"data": {"updated": await service.update_by_slug(slug, payload.name)}}

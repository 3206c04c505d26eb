"""
User endpoints - CRUD and paginated listing (RESTful API).
Design: Thin controller; UserService holds business logic. Errors are
ServiceError subclasses mapped to status codes in app.api.errors.
"""

import uuid

from fastapi import APIRouter, Request, status

from app.core.dependencies import UserServiceDep
from app.core.query import parse_query
from app.schemas.error import ErrorResponse
from app.schemas.pagination import PaginationResponse
from app.schemas.user import UserCreate, UserResponse, UserUpdate

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
}


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def create_user(svc: UserServiceDep, data: UserCreate):
    """Create user. Returns the created user without password."""
    user = await svc.create_user(data)
    return UserResponse.model_validate(user)


@router.get("", response_model=PaginationResponse[UserResponse], responses=ERROR_RESPONSES)
async def list_users(svc: UserServiceDep, request: Request):
    """
    List users. REST: GET /users?page=1&page_size=100&sort_by=created_at&sort_order=desc&country=ES.
    Every other whitelisted field may be repeated to filter by several values.
    """
    spec = parse_query(request.query_params)
    res = await svc.list_users(spec)
    return PaginationResponse[UserResponse](
        page=res.page,
        page_size=res.page_size,
        total_records=res.total_records,
        sort_by=res.sort_by,
        sort_order=res.sort_order,
        filters=res.filters,
        data=[UserResponse.model_validate(u) for u in res.data],
    )


@router.get("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
async def get_user(svc: UserServiceDep, user_id: uuid.UUID):
    user = await svc.get_user(user_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
async def update_user(svc: UserServiceDep, user_id: uuid.UUID, data: UserUpdate):
    """Partial update: fields left out of the body are unchanged."""
    user = await svc.update_user(user_id, data)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
async def delete_user(svc: UserServiceDep, user_id: uuid.UUID):
    """Soft delete. Idempotent: deleting twice returns 204 both times."""
    await svc.delete_user(user_id)

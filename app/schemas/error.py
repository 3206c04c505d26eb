"""Error response schemas - shape of every non-2xx body."""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    field: str
    description: str


class ErrorResponse(BaseModel):
    code: int
    message: str
    details: list[ErrorDetail] = []

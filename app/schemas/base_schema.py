from typing import Generic, TypeVar, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Meta(CamelModel):
    page: Optional[int] = None
    page_size: Optional[int] = None
    total: Optional[int] = None


class Pagination(CamelModel):
    total: int
    page: int
    page_size: int
    total_pages: int


class ApiResponse(CamelModel, Generic[T]):
    success: bool
    data: Optional[T]
    meta: Optional[Meta] = None
    pagination: Optional[Pagination] = None
    message: Optional[str] = None
    errors: Optional[list] = None
    trace_id: str

"""Shared schema building blocks."""

from uuid import UUID

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python, readable from ORM rows."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


class CountResponse(BaseModel):
    count: int
    message: str


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CollegeBrief(CamelModel):
    id: UUID
    name: str
    slug: str

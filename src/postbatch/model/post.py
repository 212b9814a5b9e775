from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAX_BODY_LENGTH = 1000


class Post(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    user_id: int = Field(alias="userId")
    title: str
    body: str


class PostPage(BaseModel):
    """
    One offset-addressed slice of the posts table plus the metadata needed to
    walk the rest of it.
    """
    content: List[Post]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next


class BatchInsertResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str
    posts_inserted: int


class FetchRecordResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    content: List[Post]
    current_page: int
    total_pages: int
    total_elements: int
    page_size: int
    has_next: bool
    has_previous: bool
    is_first: bool
    is_last: bool

    @classmethod
    def from_page(cls, page: PostPage) -> "FetchRecordResponse":
        return cls(
            content=page.content,
            current_page=page.page,
            total_pages=page.total_pages,
            total_elements=page.total_elements,
            page_size=page.size,
            has_next=page.has_next,
            has_previous=page.has_previous,
            is_first=page.is_first,
            is_last=page.is_last,
        )


class HealthResponse(BaseModel):
    status: str
    message: str

from enum import Enum
from typing import Annotated, List, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from services.content import parse_tags


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


def _clean_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Title cannot be blank")
    return value


Title = Annotated[str, Field(min_length=1), AfterValidator(_clean_title)]


class BlogPostCreate(BaseModel):
    title: Title
    excerpt: Optional[str] = Field(None, max_length=1000)
    content: str = ""
    cover_image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: PostStatus = PostStatus.DRAFT

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Union[str, List[str], None]) -> List[str]:
        return parse_tags(value)


class BlogPostUpdate(BaseModel):
    """Partial patch: only fields present in the request body are applied."""
    title: Optional[Title] = None
    excerpt: Optional[str] = Field(None, max_length=1000)
    content: Optional[str] = None
    cover_image: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[PostStatus] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        return None if value is None else parse_tags(value)


class BlogPostResponse(BaseModel):
    id: str
    title: str
    slug: str
    excerpt: str = ""
    content: str = ""
    cover_image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: PostStatus
    published_at: Optional[int] = None
    created_at: int
    updated_at: int
    reading_time: int
    author_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = ("title", "content", "label")


def clean_text(value: Any) -> str | None:
    """Normalize an incoming form/JSON value; blank strings become None."""
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


class Post(BaseModel):
    """A stored blog post, serialized with the camelCase names clients expect."""

    id: int = Field(..., description="Post ID")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body")
    label: str = Field(..., description="Free-form category")
    slug: str = Field(..., description="URL-safe identifier derived from the title")
    image: str | None = Field(None, description="Public URL of the post image")
    date: str | None = Field(None, description="Short display date, e.g. 'Oct 18'")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime | None = Field(None, alias="updatedAt", description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, extra="ignore")

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict as persisted in the posts file."""
        return self.model_dump(mode="json", by_alias=True)


class PostCreate(BaseModel):
    """Create payload. Kept permissive so the service can report missing fields as a 400."""

    title: str | None = None
    content: str | None = None
    label: str | None = None

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if clean_text(getattr(self, name)) is None]


class PostUpdate(BaseModel):
    """Partial update payload; only supplied fields are merged."""

    title: str | None = None
    content: str | None = None
    label: str | None = None

    def supplied(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class PostCreated(BaseModel):
    success: bool = True
    id: int
    slug: str


class PostMutation(BaseModel):
    success: bool = True
    post: Post

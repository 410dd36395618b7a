from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from ..database import Base

POST_INDEXES = (
    # Listing is newest first
    Index("ix_posts_created_at_desc", "created_at", postgresql_ops={"created_at": "DESC"}),
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Post(Base):
    """SQLAlchemy model representing a blog post.

    Attributes:
        id (int): Unique post identifier.
        title (str): Post title.
        content (str): Full post content (unbounded text).
        label (str): Free-form category.
        slug (str): URL-safe identifier; indexed but deliberately not unique.
        image (str | None): Public URL of the post image.
        date (str | None): Short display date captured at creation.
        created_at (datetime): Creation timestamp (UTC).
        updated_at (datetime | None): Last modification timestamp (UTC).
    """

    __tablename__ = "posts"
    __table_args__ = POST_INDEXES

    id = Column(Integer, primary_key=True, autoincrement=True, doc="Unique post identifier")
    title = Column(Text, nullable=False, doc="Post title")
    content = Column(Text, nullable=False, doc="Full post content")
    label = Column(Text, nullable=False, index=True, doc="Free-form category")
    slug = Column(Text, nullable=False, index=True, doc="URL-safe identifier")
    image = Column(Text, nullable=True, doc="Public URL of the post image")
    date = Column(String(16), nullable=True, doc="Short display date")
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, doc="Post creation timestamp")
    updated_at = Column(DateTime(timezone=True), nullable=True, doc="Last modification timestamp")

    def __repr__(self) -> str:
        title_value = getattr(self, "title", None)
        if isinstance(title_value, str) and title_value:
            title_repr = title_value[:30] + "..." if len(title_value) > 30 else title_value
        else:
            title_repr = ""
        return f"<Post(id={self.id}, title={title_repr!r}, slug={self.slug!r})>"

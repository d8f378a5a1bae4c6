"""Read entities served by the query side."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CommentReadEntity(BaseModel):
    """A comment embedded in a post read entity."""

    model_config = ConfigDict(frozen=True)

    comment_id: UUID
    post_id: UUID
    username: str
    comment: str
    comment_date: datetime
    edited: bool = False


class PostReadEntity(BaseModel):
    """Denormalized projection of a post aggregate.

    Entities are owned by the read store and written by the projector on the
    write side. The query side only ever reads them, so they are frozen.

    Attributes:
        post_id: Unique identifier of the post.
        author: Name of the post's author.
        message: Textual content of the post.
        date_posted: When the post was created.
        date_modified: When the post was last edited, if ever.
        likes: Number of likes.
        comments: Comments in the order they were added.
    """

    model_config = ConfigDict(frozen=True)

    post_id: UUID
    author: str
    message: str
    date_posted: datetime
    date_modified: datetime | None = None
    likes: int = Field(default=0, ge=0)
    comments: tuple[CommentReadEntity, ...] = ()

    @property
    def has_comments(self) -> bool:
        return len(self.comments) >= 1

# microblog/feed/schemas.py
from pydantic import BaseModel


class AuthorMini(BaseModel):
    id: int
    username: str


class ParentAuthorMini(BaseModel):
    username: str


class ParentPostMini(BaseModel):
    id: int
    author: ParentAuthorMini


class EnrichedPostOut(BaseModel):
    id: int
    author_id: int
    parent_post_id: int | None = None
    content: str
    created_at: str          # relativo: "3 hours", "2 days"
    author: AuthorMini
    parent_post: ParentPostMini | None = None

    is_liked: bool
    likes_count: int
    replies_count: int

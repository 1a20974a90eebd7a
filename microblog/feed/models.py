# microblog/feed/models.py
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Integer,
    Text,
    DateTime,
    func,
    ForeignKey,
    UniqueConstraint,
)
from microblog.db.base import Base
from microblog.users.models import User


class Post(Base):
    """
    Post o respuesta.
    parent_post_id = NULL → post de primer nivel; si no, es reply de ese post.
    """
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    parent_post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    author: Mapped[User] = relationship(User)
    parent_post: Mapped[Optional["Post"]] = relationship(
        "Post", remote_side="Post.id"
    )


class PostLike(Base):
    """
    Like de un usuario sobre un post.
    Un usuario solo puede dar like una vez al mismo post.
    """
    __tablename__ = "posts_likes"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_posts_likes_user_post"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False
    )
    # el feed de "likes" se ordena por ESTA fecha, no por la del post
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    post: Mapped[Post] = relationship(Post)

# microblog/feed/repository.py
from typing import Iterable

from sqlalchemy import select, desc, func
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from microblog.feed.models import Post, PostLike


# -------------------------
# POSTS DE UN PERFIL
# -------------------------
def _with_parent_author():
    # del padre solo se usa el username del autor
    return selectinload(Post.parent_post).selectinload(Post.author)


async def list_top_level_posts_by_author(db: AsyncSession, author_id: int) -> list[Post]:
    q = (
        select(Post)
        .where(Post.author_id == author_id, Post.parent_post_id.is_(None))
        .options(selectinload(Post.author))
        .order_by(desc(Post.created_at))
    )
    res = await db.execute(q)
    return list(res.scalars())


async def list_replies_by_author(db: AsyncSession, author_id: int) -> list[Post]:
    q = (
        select(Post)
        .where(Post.author_id == author_id, Post.parent_post_id.is_not(None))
        .options(selectinload(Post.author), _with_parent_author())
        .order_by(desc(Post.created_at))
    )
    res = await db.execute(q)
    return list(res.scalars())


async def list_likes_by_user(db: AsyncSession, user_id: int) -> list[PostLike]:
    """
    Likes del usuario con su post (autor + autor del padre),
    del like más reciente al más viejo.
    """
    q = (
        select(PostLike)
        .where(PostLike.user_id == user_id)
        .options(
            selectinload(PostLike.post).selectinload(Post.author),
            selectinload(PostLike.post)
            .selectinload(Post.parent_post)
            .selectinload(Post.author),
        )
        .order_by(desc(PostLike.created_at))
    )
    res = await db.execute(q)
    return list(res.scalars())


async def count_posts_by_author(db: AsyncSession, author_id: int) -> int:
    q = select(func.count()).select_from(Post).where(Post.author_id == author_id)
    res = await db.execute(q)
    return int(res.scalar_one() or 0)


# -------------------------
# ❤️ LIKES / REPLIES POR POST
# -------------------------
async def count_post_likes(db: AsyncSession, post_id: int) -> int:
    q = select(func.count()).select_from(PostLike).where(PostLike.post_id == post_id)
    res = await db.execute(q)
    return int(res.scalar_one() or 0)


async def count_post_replies(db: AsyncSession, post_id: int) -> int:
    q = select(func.count()).select_from(Post).where(Post.parent_post_id == post_id)
    res = await db.execute(q)
    return int(res.scalar_one() or 0)


async def is_post_already_liked(
    db: AsyncSession,
    post_id: int,
    viewer_id: int | None,
) -> bool:
    if viewer_id is None:
        return False
    q = select(PostLike.id).where(
        PostLike.post_id == post_id,
        PostLike.user_id == viewer_id,
    )
    res = await db.execute(q)
    return res.scalar_one_or_none() is not None


# -------------------------
# versiones en lote (un query por métrica para todo el feed)
# -------------------------
async def count_likes_for_posts(db: AsyncSession, post_ids: Iterable[int]) -> dict[int, int]:
    ids = list(post_ids)
    if not ids:
        return {}
    q = (
        select(PostLike.post_id, func.count())
        .where(PostLike.post_id.in_(ids))
        .group_by(PostLike.post_id)
    )
    res = await db.execute(q)
    return {post_id: int(n) for post_id, n in res.all()}


async def count_replies_for_posts(db: AsyncSession, post_ids: Iterable[int]) -> dict[int, int]:
    ids = list(post_ids)
    if not ids:
        return {}
    q = (
        select(Post.parent_post_id, func.count())
        .where(Post.parent_post_id.in_(ids))
        .group_by(Post.parent_post_id)
    )
    res = await db.execute(q)
    return {post_id: int(n) for post_id, n in res.all()}


async def liked_post_ids(
    db: AsyncSession,
    viewer_id: int | None,
    post_ids: Iterable[int],
) -> set[int]:
    ids = list(post_ids)
    if viewer_id is None or not ids:
        return set()
    res = await db.execute(
        select(PostLike.post_id).where(
            PostLike.user_id == viewer_id,
            PostLike.post_id.in_(ids),
        )
    )
    return {row[0] for row in res.all()}

# microblog/follows/repository.py
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from microblog.follows.models import Follow


async def count_followers(db: AsyncSession, user_id: int) -> int:
    q = select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
    res = await db.execute(q)
    return int(res.scalar_one() or 0)


async def count_following(db: AsyncSession, user_id: int) -> int:
    q = select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    res = await db.execute(q)
    return int(res.scalar_one() or 0)


async def fetch_follow_count(db: AsyncSession, user_id: int) -> dict:
    return {
        "followers": await count_followers(db, user_id),
        "following": await count_following(db, user_id),
    }

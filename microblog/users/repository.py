# microblog/users/repository.py
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from microblog.users.models import User


async def get_by_username(db: AsyncSession, username: str) -> User | None:
    res = await db.execute(select(User).where(User.username == username))
    return res.scalar_one_or_none()


async def get_by_username_with_profile(db: AsyncSession, username: str) -> User | None:
    res = await db.execute(
        select(User)
        .where(User.username == username)
        .options(selectinload(User.profile))
    )
    return res.scalar_one_or_none()

import logging
from microblog.db.session import engine
from microblog.db.base import Base

# 👇 importa todos los modelos que deben existir en la DB
from microblog.users.models import User  # noqa: F401
from microblog.profile.models import Profile  # noqa: F401
from microblog.feed.models import Post, PostLike  # noqa: F401
from microblog.follows.models import Follow  # noqa: F401

log = logging.getLogger("uvicorn")


async def init_models():
    """
    Crea/verifica las tablas de Base.metadata.
    Si la DB no está, el error sube: sin DB no hay nada que servir.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("✅ DB init: tablas creadas/verificadas.")

# microblog/users/models.py
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, DateTime, func
from microblog.db.base import Base


class User(Base):
    """Identidad (la gestiona el servicio de auth; aquí solo se lee)."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    profile: Mapped[Optional["Profile"]] = relationship(
        "Profile", back_populates="user", uselist=False
    )


# registra Profile en el mapper antes de resolver la relación
from microblog.profile.models import Profile  # noqa: E402,F401

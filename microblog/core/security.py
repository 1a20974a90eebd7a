# microblog/core/security.py
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from microblog.core.config import settings

ALGORITHM = "HS256"


def create_access_token(sub: str, expires_minutes: int | None = None) -> str:
    # Los tokens los emite el servicio de auth; aquí solo para dev y tests
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MIN
    )
    payload = {"sub": sub, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    sub = payload.get("sub")
    if not sub:
        raise JWTError("missing sub")
    return sub

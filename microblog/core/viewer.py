# microblog/core/viewer.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Header, Query
from jose import JWTError

from microblog.core.security import decode_access_token

log = logging.getLogger("uvicorn")


@dataclass(frozen=True)
class Viewer:
    """Quién está mirando. id=None → visitante anónimo."""
    id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.id is not None


ANONYMOUS = Viewer()


def _extract_token(token: str | None, authorization: str | None) -> str | None:
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
    return token or None


def resolve_viewer(token: str | None, authorization: str | None) -> Viewer:
    """
    Token por query (?token=) o Authorization: Bearer XXX.
    Sin token o con token inválido → ANONYMOUS (los feeds son públicos).
    """
    tok = _extract_token(token, authorization)
    if not tok:
        return ANONYMOUS
    try:
        return Viewer(id=int(decode_access_token(tok)))
    except (JWTError, ValueError) as e:
        log.debug(f"token inválido, se trata como anónimo: {e!r}")
        return ANONYMOUS


async def get_viewer(
    token: str | None = Query(None),
    authorization: str | None = Header(None),
) -> Viewer:
    return resolve_viewer(token, authorization)

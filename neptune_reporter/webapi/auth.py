"""Bearer token check for the status API."""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

TOKEN_ENV = "REPORTER_WEBAPI_TOKEN"
TOKEN_FILE_ENV = "REPORTER_WEBAPI_TOKEN_FILE"

_bearer_scheme = HTTPBearer(auto_error=False)


def configured_token() -> Optional[str]:
    """Token from the environment or from the file it points to; ``None`` disables auth."""

    token = (os.environ.get(TOKEN_ENV) or "").strip()
    if token:
        return token
    token_file = os.environ.get(TOKEN_FILE_ENV)
    if not token_file:
        return None
    path = Path(token_file)
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8").strip() or None
    except OSError as exc:
        raise RuntimeError(f"No se pudo leer el token desde {path}: {exc}") from exc


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_token(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer_scheme),
) -> None:
    expected = configured_token()
    if expected is None:
        return
    if credentials is None:
        raise _unauthorized("Token requerido")
    if credentials.scheme.lower() != "bearer" or not secrets.compare_digest(credentials.credentials, expected):
        raise _unauthorized("Token inválido")

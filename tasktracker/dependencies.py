from typing import Iterator

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .auth import AuthService
from .database import session_scope


def get_db(request: Request) -> Iterator[Session]:
    yield from session_scope(request.app.state.session_factory)


def get_auth(request: Request) -> AuthService:
    return request.app.state.auth


def require_user_id(
    authorization: str = Header(None),
    auth: AuthService = Depends(get_auth),
) -> str:
    """Resolve the bearer token to its subject (the caller's user id)."""
    token = authorization
    if token and token.startswith("Bearer "):
        token = token[7:]
    return auth.verify(token)

"""FastAPI dependency injection for identity, database, provider and locks."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from budgetsync.core.exceptions import UnauthenticatedError
from budgetsync.core.locks import UserLockRegistry
from budgetsync.core.security import get_user_id_from_token
from budgetsync.db.session import get_db
from budgetsync.providers.base import TransactionProvider

__all__ = ["get_current_user_id", "get_db", "get_locks", "get_provider"]

# Missing credentials are reported through our own error body, not FastAPI's 403.
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """
    Resolve the caller's user id from the bearer JWT.

    Returns:
        The token's ``sub`` claim

    Raises:
        UnauthenticatedError: If the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("AUTH_001")

    try:
        user_id = get_user_id_from_token(credentials.credentials)
    except JWTError as e:
        raise UnauthenticatedError("AUTH_001") from e

    request.state.user_id = user_id
    return user_id


def get_provider(request: Request) -> TransactionProvider:
    """Transaction provider configured on the application at startup."""
    return request.app.state.provider


def get_locks(request: Request) -> UserLockRegistry:
    return request.app.state.user_locks

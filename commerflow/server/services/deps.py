"""
Request Dependencies.

Provides the database session, the repository bundle and the authenticated
caller to API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from commerflow.core.database import SqlRepoBundle, build_sql_repos, get_session
from commerflow.core.database.entities.users import User
from commerflow.core.errors import AuthenticationError, AuthorizationError
from commerflow.core.logging_config import get_logger
from commerflow.core.security import decode_access_token

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_repos(session: SessionDep) -> SqlRepoBundle:
    return build_sql_repos(session)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]


async def get_current_user(
    repos: ReposDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Resolve the caller from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: When the header is missing, the token is invalid or
            expired, or the account it names no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    claims = decode_access_token(credentials.credentials)
    user_id = claims.get("id") or claims.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token")

    user = await repos.users.get_by_id(user_id)
    if user is None:
        logger.debug(f"Token refers to unknown user {user_id}")
        raise AuthenticationError("User not found")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    """Allow only administrators through."""
    if not user.is_admin:
        raise AuthorizationError("Admin access required")
    return user


AdminUser = Annotated[User, Depends(require_admin)]

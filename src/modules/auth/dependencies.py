"""FastAPI dependencies for resolving the authenticated user."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.modules.auth.exceptions import AuthenticationError
from src.modules.auth.models import User
from src.modules.auth.service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    """Return the auth service built during application startup."""
    service: AuthService = request.app.state.auth_service
    return service


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Resolve the ``Authorization: Bearer`` header to a live user.

    Returns:
        The user named by the token.

    Raises:
        AuthenticationError: If the header is missing, the token is invalid
            or expired, or the user no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    return await auth_service.resolve_token(credentials.credentials)


CurrentUser = Annotated[User, Depends(get_current_user)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]

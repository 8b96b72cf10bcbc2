"""Authentication API routes."""

from fastapi import APIRouter, status

from src.modules.auth.dependencies import AuthServiceDep, CurrentUser
from src.modules.auth.schemas import (
    ApiResponse,
    AuthData,
    LoginRequest,
    ProfileUpdate,
    UserCreate,
    UserData,
    UserResponse,
)
from src.modules.auth.service import AuthResult

router = APIRouter(prefix="/auth", tags=["authentication"])


def _auth_data(result: AuthResult) -> AuthData:
    return AuthData(
        user=UserResponse.model_validate(result.user),
        token=result.token.token,
        expires_in=result.token.expires_in,
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Create a new account and receive a JWT token.",
)
async def register(
    data: UserCreate,
    auth_service: AuthServiceDep,
) -> ApiResponse[AuthData]:
    """Register a new user."""
    result = await auth_service.register(data)
    return ApiResponse(message="User registered successfully", data=_auth_data(result))


@router.post(
    "/login",
    response_model=ApiResponse[AuthData],
    summary="Login with email and password",
    description="Authenticate and receive a JWT token.",
)
async def login(
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> ApiResponse[AuthData]:
    """Authenticate user and return JWT token."""
    result = await auth_service.login(data.email, data.password)
    return ApiResponse(message="Login successful", data=_auth_data(result))


@router.get(
    "/profile",
    response_model=ApiResponse[UserData],
    summary="Get the current user's profile",
)
async def get_profile(user: CurrentUser) -> ApiResponse[UserData]:
    """Return the authenticated user."""
    return ApiResponse(
        message="Profile retrieved successfully",
        data=UserData(user=UserResponse.model_validate(user)),
    )


@router.put(
    "/profile",
    response_model=ApiResponse[UserData],
    summary="Update the current user's profile",
    description=(
        "Only firstName, lastName, phone and dateOfBirth can be changed; "
        "other fields are ignored."
    ),
)
async def update_profile(
    data: ProfileUpdate,
    user: CurrentUser,
    auth_service: AuthServiceDep,
) -> ApiResponse[UserData]:
    """Apply a partial update to the authenticated user."""
    updated = await auth_service.update_profile(user, data)
    return ApiResponse(
        message="Profile updated successfully",
        data=UserData(user=UserResponse.model_validate(updated)),
    )


@router.post(
    "/logout",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    summary="Logout",
    description="Stateless: the client discards its token.",
)
async def logout(
    user: CurrentUser,
    auth_service: AuthServiceDep,
) -> ApiResponse[None]:
    """Log the current user out."""
    await auth_service.logout(user)
    return ApiResponse(message="Logout successful")


@router.get(
    "/verify",
    response_model=ApiResponse[UserData],
    summary="Verify a bearer token",
)
async def verify(user: CurrentUser) -> ApiResponse[UserData]:
    """Confirm the token is valid and return its user."""
    return ApiResponse(
        message="Token is valid",
        data=UserData(user=UserResponse.model_validate(user)),
    )

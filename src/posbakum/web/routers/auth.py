from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from posbakum.core.modules.staff.models import StaffView
from posbakum.web.deps import AppDep, AuthTokenDep
from posbakum.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str = Field(..., description="Staff username")
    password: str = Field(..., description="Staff password")


class LoginResponse(BaseModel):
    """Authentication response."""

    token: str = Field(..., description="Authentication token for subsequent requests")
    staff: StaffView = Field(..., description="Logged-in staff member and scope")


@router.post(
    "/auth/login",
    summary="Authenticate staff",
    description="Authenticate with username and password to receive an authentication token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> LoginResponse:
    """Authenticate staff and create session."""

    token, staff = await app.login(login_data.username, login_data.password)

    response.set_cookie(
        key="auth_token",
        value=token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
        max_age=12 * 60 * 60,
    )

    return LoginResponse(token=token, staff=staff)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current authentication session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie("auth_token")

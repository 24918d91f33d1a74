from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, Field

from tasky.core.modules.user.models import UserView
from tasky.web.cookies import clear_session_cookies, read_session_cookie, set_session_cookies
from tasky.web.deps import AppDep, ConfigDep

router = APIRouter(tags=["auth"])


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Email address, unique per user")
    password: str = Field(..., min_length=1, description="Plaintext password")
    name: str = Field(..., min_length=1, description="Display name")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password for authentication")


class LoginResponse(BaseModel):
    msg: str = "login successful"


@router.post("/signup", summary="Create an account and open a session")
async def signup(signup_data: SignupRequest, app: AppDep, config: ConfigDep, response: Response) -> UserView:
    user, issued = await app.signup(signup_data.email, signup_data.password, signup_data.name)
    set_session_cookies(
        response,
        user_id=str(user.id),
        username=user.name,
        expires_at=issued.expires_at,
        token=issued.token,
        secure=config.cookie_secure,
    )
    return UserView.from_domain(user)


@router.post("/login", summary="Authenticate user")
async def login(
    login_data: LoginRequest, request: Request, app: AppDep, config: ConfigDep, response: Response
) -> LoginResponse:
    """Verify credentials; a new token is only issued when the current one is missing or about to expire."""
    result = await app.login(login_data.email, login_data.password, read_session_cookie(request))
    set_session_cookies(
        response,
        user_id=str(result.user.id),
        username=result.user.name,
        expires_at=result.expires_at,
        token=result.issued.token if result.issued else None,
        secure=config.cookie_secure,
    )
    return LoginResponse()


@router.post("/logout", summary="End session", status_code=204)
async def logout(response: Response) -> None:
    # Tokens are self-contained; an unexpired token stays valid until its expiry
    clear_session_cookies(response)

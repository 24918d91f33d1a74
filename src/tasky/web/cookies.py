"""Session cookie contract shared with browsers."""

from datetime import datetime

from fastapi import Request, Response

from tasky.errors import CookieReadError

TOKEN_COOKIE = "token"
USER_ID_COOKIE = "userID"
USERNAME_COOKIE = "username"


def read_session_cookie(request: Request) -> str | None:
    """Return the raw session token, or None when no session cookie was sent."""
    # Starlette parses the Cookie header leniently; failing here means a local defect, not bad client input
    try:
        value = request.cookies.get(TOKEN_COOKIE)
    except (KeyError, ValueError) as e:
        raise CookieReadError("Failed to read session cookie") from e
    return value or None


def set_session_cookies(
    response: Response,
    *,
    user_id: str,
    username: str,
    expires_at: datetime | None,
    token: str | None = None,
    secure: bool = False,
) -> None:
    """Set the session cookies, all expiring with the session.

    The `token` cookie is only written when a new token was issued.
    """
    cookies = {USER_ID_COOKIE: user_id, USERNAME_COOKIE: username}
    if token is not None:
        cookies = {TOKEN_COOKIE: token, **cookies}
    for key, value in cookies.items():
        response.set_cookie(
            key=key,
            value=value,
            expires=expires_at,
            httponly=key == TOKEN_COOKIE,
            samesite="lax",
            secure=secure,
        )


def clear_session_cookies(response: Response) -> None:
    for key in (TOKEN_COOKIE, USER_ID_COOKIE, USERNAME_COOKIE):
        response.delete_cookie(key)

"""Operator session authentication dependencies."""

from fastapi import Header, Request

from keymint.common.config import get_settings
from keymint.common.exceptions import AuthDeniedError
from keymint.identity.session import Principal, verify_session_token


def _extract_token(request: Request, authorization: str | None) -> str | None:
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
    return request.cookies.get(get_settings().session_cookie_name)


async def get_principal(
    request: Request,
    authorization: str | None = Header(None),
) -> Principal | None:
    """FastAPI dependency resolving the signed-in principal, if any."""
    token = _extract_token(request, authorization)
    if not token:
        return None
    return verify_session_token(token)


async def require_admin(
    request: Request,
    authorization: str | None = Header(None),
) -> Principal:
    """FastAPI dependency that runs the admin gate on every request.

    Any denial raises AuthDeniedError; the app's handler answers 403 and
    clears the session cookie.
    """
    from keymint.admin.gate import Authorized
    from keymint.deps import get_admin_gate

    principal = await get_principal(request, authorization)
    verdict = await get_admin_gate().authorize(principal)
    if not isinstance(verdict, Authorized):
        raise AuthDeniedError(verdict.message)
    return verdict.principal

"""Operator authentication API router."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response

from keymint.common.config import get_settings
from keymint.common.exceptions import InvalidCredentialsError
from keymint.common.security import require_admin
from keymint.identity.schemas import LoginRequest, LoginResponse, PrincipalResponse
from keymint.identity.session import Principal, create_session_token

router = APIRouter(prefix="/auth")


def _get_service():
    from keymint.deps import get_operator_service
    return get_operator_service()


def _get_db():
    from keymint.deps import get_db
    return get_db()


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            operator = await svc.authenticate(session, body.email, body.password)
            principal = Principal(user_id=operator.id, email=operator.email)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=e.message)

    settings = get_settings()
    token = create_session_token(principal)
    response = JSONResponse(
        LoginResponse(
            user_id=principal.user_id, email=principal.email, access_token=token,
        ).model_dump()
    )
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/logout", status_code=204)
async def logout():
    response = Response(status_code=204)
    response.delete_cookie(get_settings().session_cookie_name)
    return response


@router.get("/session", response_model=PrincipalResponse)
async def current_session(principal: Principal = Depends(require_admin)):
    return PrincipalResponse(
        user_id=principal.user_id, email=principal.email, is_admin=True,
    )

"""FastAPI application factory for Keymint."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keymint.common.config import get_settings
from keymint.common.exceptions import AuthDeniedError
from keymint.common.logging import setup_logging
from keymint.common.schemas import ErrorResponse, HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from keymint.deps import get_db
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthDeniedError)
    async def auth_denied(request: Request, exc: AuthDeniedError):
        # A non-admin session must not linger: end it on every denial.
        response = JSONResponse(
            ErrorResponse(error="Access denied", code=exc.code, detail=exc.message).model_dump(),
            status_code=403,
        )
        response.delete_cookie(settings.session_cookie_name)
        return response

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from keymint.identity.router import router as identity_router
    from keymint.licensing.router import router as licensing_router

    prefix = settings.api_prefix
    app.include_router(identity_router, prefix=prefix, tags=["auth"])
    app.include_router(licensing_router, prefix=prefix, tags=["licensing"])

    return app

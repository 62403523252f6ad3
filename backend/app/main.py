# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging_config import configure_logging
from app.middleware.request_logging import RequestLoggingMiddleware
from app.routers.admin import router as admin_router
from app.routers.auth import router as auth_router
from app.routers.cron import router as cron_router
from app.routers.health import router as health_router
from app.routers.root import router as root_router
from app.routers.search import router as search_router
from app.core.exception_handlers import app_error_handler, unhandled_exception_handler
from app.core import AppError

configure_logging()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    app.add_middleware(RequestLoggingMiddleware)

    # ---- CORS (env-driven) ----
    # CORS_ALLOW_ORIGINS="http://localhost:3000,https://yourapp.vercel.app"
    allow_origins = _split_csv(settings.CORS_ALLOW_ORIGINS)

    cors_kwargs = dict(
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.CORS_ALLOW_VERCEL_PREVIEWS:
        # Allows https://<anything>.vercel.app
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"^https:\/\/.*\.vercel\.app$",
            **cors_kwargs,
        )
    else:
        # credentials are allowed, so never "*"
        if not allow_origins:
            allow_origins = ["http://localhost:3000"]

        app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            **cors_kwargs,
        )

    # Exception handlers
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(root_router)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(search_router)
    app.include_router(admin_router)
    app.include_router(cron_router)

    return app


app = create_app()

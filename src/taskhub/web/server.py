from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from taskhub.app import App
from taskhub.config import Config
from taskhub.errors import UserError
from taskhub.web.error_handlers import general_exception_handler, request_validation_handler, user_error_handler
from taskhub.web.gatekeeper import EdgeGatekeeper
from taskhub.web.openapi import set_custom_openapi
from taskhub.web.routers import (
    auth_router,
    comments_router,
    progress_router,
    projects_router,
    requirements_router,
    tasks_router,
    workspaces_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="TaskHub API", lifespan=lifespan)

    # Runs before routing; registered first so CORS stays outermost
    app.add_middleware(EdgeGatekeeper, secret=config.jwt_secret, secure_cookies=config.is_production)

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/api/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(workspaces_router, prefix="/api")
    app.include_router(projects_router, prefix="/api")
    app.include_router(tasks_router, prefix="/api")
    app.include_router(requirements_router, prefix="/api")
    app.include_router(progress_router, prefix="/api")
    app.include_router(comments_router, prefix="/api")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app

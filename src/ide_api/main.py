"""Workspace IDE API main application."""
from contextlib import asynccontextmanager
from pathlib import Path

import loguru
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ide_api.api import create_api_router
from ide_api.exceptions import register_exception_handlers
from shared.config import Settings, settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The workspace root is resolved once here and handed to services through
    ``app.state``; request handlers never re-read configuration.

    Args:
        app_settings: Settings to use (default: the process-wide ``settings``)

    Returns:
        Configured FastAPI instance
    """
    app_settings = app_settings or settings
    workspace_root = Path(app_settings.workspace_root).resolve()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan context manager.

        Creates the workspace directory on startup if it is missing.
        """
        if workspace_root.is_dir():
            loguru.logger.info(f"Workspace directory exists: {workspace_root}")
        else:
            # 创建失败时直接抛出，uvicorn 会中止启动
            workspace_root.mkdir(parents=True, exist_ok=True)
            loguru.logger.info(f"Workspace directory created: {workspace_root}")

        loguru.logger.info(
            f"IDE server started: API base {app_settings.api_prefix or '/'}, "
            f"port {app_settings.port}, workspace {workspace_root}"
        )
        yield

        loguru.logger.info("Shutting down...")

    app = FastAPI(
        title="Workspace IDE API",
        description="Browser IDE file manager - workspace folders, project trees and files",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.workspace_root = workspace_root

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, expose_details=app_settings.environment == "development")
    app.include_router(create_api_router(), prefix=app_settings.api_prefix)

    return app


app = create_app()


if __name__ == '__main__':
    import uvicorn
    uvicorn.run(
        'ide_api.main:app',
        host=settings.host,
        port=settings.port,
        reload=True,
    )

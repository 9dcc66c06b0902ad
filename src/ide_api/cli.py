"""CLI entry point for the Workspace IDE API."""
import sys

import loguru
import uvicorn

from shared.config import settings


def run_api():
    """Run Workspace IDE API server."""
    loguru.logger.remove()
    loguru.logger.add(sys.stderr, level=settings.log_level.upper())
    uvicorn.run(
        "ide_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run_api()

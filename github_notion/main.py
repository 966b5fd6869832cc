"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from github_notion import __version__
from github_notion.api import webhooks
from github_notion.config import AppSettings
from github_notion.middleware.logging import RequestLoggingMiddleware
from github_notion.utils.logging import get_logger, setup_logging

# Configure structured logging
setup_logging(AppSettings().log_level)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Share one HTTP client across requests for the Notion API."""
    logger.info("Starting GitHub to Notion webhook bridge")
    app.state.http_client = httpx.AsyncClient()
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info("Shutting down GitHub to Notion webhook bridge")


# Create FastAPI application
app = FastAPI(
    title="GitHub to Notion Webhook Bridge",
    description="Syncs Notion task status and PR links from GitHub pull request webhooks",
    version=__version__,
    lifespan=lifespan,
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

app.include_router(webhooks.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

"""FastAPI application exposing the explorer views."""

import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
import structlog

from advc_explorer import __version__
from advc_explorer.core.explorer import BlockExplorer
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.utils.logging import setup_logging
from advc_explorer.utils.metrics import metrics, setup_metrics
from advc_explorer.api.routers import explorer, market

logger = structlog.get_logger(__name__)


def create_app(config: Optional[ExplorerConfig] = None,
               block_explorer: Optional[BlockExplorer] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    When no explorer is supplied one is built from ``config`` at startup and
    closed at shutdown.
    """
    config = config or ExplorerConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.explorer is None
        if owned:
            setup_logging(config)
            app.state.explorer = BlockExplorer(config)
            app.state.explorer.initialize()
        logger.info("Explorer API started")

        yield

        logger.info("Shutting down explorer API")
        if owned:
            app.state.explorer.close()
            app.state.explorer = None

    app = FastAPI(
        title="AdventureCoin Explorer API",
        description="Block, transaction, address, mempool and mining views",
        version=__version__,
        lifespan=lifespan
    )
    app.state.explorer = block_explorer

    setup_metrics(app)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Request logging and metrics middleware."""
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error("Request failed",
                        method=request.method,
                        url=str(request.url),
                        error=str(e),
                        process_time=process_time)
            metrics.request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=500
            ).inc()
            raise

        process_time = time.time() - start_time
        logger.info("Request completed",
                   method=request.method,
                   url=str(request.url),
                   status_code=response.status_code,
                   process_time=process_time)
        metrics.request_count.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()
        metrics.request_duration.labels(
            method=request.method,
            endpoint=request.url.path
        ).observe(process_time)
        response.headers["X-Process-Time"] = str(process_time)
        return response

    app.include_router(market.router, prefix="/api", tags=["market"])
    app.include_router(explorer.router, prefix="/api", tags=["explorer"])

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning("HTTP exception",
                      status_code=exc.status_code,
                      detail=exc.detail,
                      url=str(request.url))
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": f"HTTP_{exc.status_code}",
                    "message": exc.detail,
                    "timestamp": datetime.now().isoformat()
                }
            }
        )

    return app

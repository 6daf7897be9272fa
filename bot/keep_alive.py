"""
Keep-alive web server for hosted deployments.
Exposes lifecycle state and interaction counters for health checks.
"""

import asyncio
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from bot import __version__
from utils.logger import get_logger

logger = get_logger("KeepAlive")

# Returns {"state": str, "ready": bool, "metrics": dict}
StatusProvider = Callable[[], Dict[str, Any]]


def create_app(status_provider: StatusProvider) -> FastAPI:
    """
    Build the health-check application.

    Args:
        status_provider: Callable returning the current bot status

    Returns:
        FastAPI app
    """
    app = FastAPI(
        title="Interaction Bot",
        description="Discord interaction bot keep-alive server",
        version=__version__,
    )

    @app.get("/")
    async def root():
        """Root endpoint."""
        status = status_provider()
        return {
            "name": "Interaction Bot",
            "version": __version__,
            "status": status.get("state", "unknown"),
        }

    @app.get("/health")
    async def health():
        """Health check endpoint for monitoring."""
        status = status_provider()
        ready = bool(status.get("ready"))

        return JSONResponse(
            status_code=200 if ready else 503,
            content={
                "status": "healthy" if ready else "degraded",
                "lifecycle": status.get("state", "unknown"),
                "discord": "connected" if ready else "disconnected",
                "metrics": status.get("metrics", {}),
            },
        )

    @app.get("/ping")
    async def ping():
        """Simple ping endpoint."""
        return {"pong": True}

    return app


class KeepAliveServer:
    """Runs the health-check app with uvicorn inside the bot's event loop."""

    def __init__(self, status_provider: StatusProvider, host: str = "0.0.0.0", port: int = 11186):
        self.app = create_app(status_provider)
        self.host = host
        self.port = port
        self._server: Optional[Any] = None
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start the keep-alive server in a background task."""
        import uvicorn

        config_uvicorn = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config_uvicorn)
        self._task = asyncio.create_task(self._server.serve(), name="keep-alive")
        logger.info(f"Keep-alive server listening on port {self.port}")

    async def stop(self) -> None:
        """Ask uvicorn to exit and wait for it."""
        if self._server is None or self._task is None:
            return

        self._server.should_exit = True
        try:
            await asyncio.wait_for(self._task, timeout=5)
        except asyncio.TimeoutError:
            self._task.cancel()
        logger.info("Keep-alive server stopped")

# ============================================================================
# METRICS SERVER
# ============================================================================
# STATUS: Metrics - HTTP exposition
# PURPOSE: Serve /metrics for Prometheus and /livez for kubelet probes
# ============================================================================
"""
Metrics Server

Minimal aiohttp server run alongside the cycle loop.

Endpoints:
    GET /metrics - Prometheus text format from the sink's registry
    GET /livez   - Liveness: version plus cycle loop counters
"""

from typing import Any, Callable, Dict, Optional

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST

from __version__ import __version__, BUILD_DATE
from core.logging import ComponentType, get_logger
from metrics.sink import PrometheusSink

logger = get_logger(__name__, ComponentType.METRICS)

StatusFn = Callable[[], Dict[str, Any]]


def create_app(sink: PrometheusSink, status_fn: Optional[StatusFn] = None) -> web.Application:
    """Build the aiohttp application (separate from start for testing)."""

    async def metrics_handler(request: web.Request) -> web.Response:
        body = sink.render()
        return web.Response(body=body, headers={"Content-Type": CONTENT_TYPE_LATEST})

    async def liveness_handler(request: web.Request) -> web.Response:
        response_data: Dict[str, Any] = {
            "status": "alive",
            "version": __version__,
            "build_date": BUILD_DATE,
        }
        if status_fn is not None:
            response_data["loop"] = status_fn()
        return web.json_response(response_data)

    app = web.Application()
    app.router.add_get("/metrics", metrics_handler)
    app.router.add_get("/livez", liveness_handler)
    app.router.add_get("/", liveness_handler)
    return app


async def start_metrics_server(
    sink: PrometheusSink,
    port: int = 8080,
    status_fn: Optional[StatusFn] = None,
    host: str = "0.0.0.0",
) -> web.AppRunner:
    """Start the exposition server; caller owns runner.cleanup()."""
    app = create_app(sink, status_fn)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"Metrics server started on port {port}")
    return runner


__all__ = [
    "create_app",
    "start_metrics_server",
]

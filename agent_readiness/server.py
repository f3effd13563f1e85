# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""
agent-readiness — Local report server.

Serves one finished report: the dashboard at ``/`` and the raw JSON at
``/api/report``. Bound to localhost on a free port.
"""

from __future__ import annotations

import logging
import socket
import threading
import webbrowser
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from agent_readiness import __version__
from agent_readiness.dashboard import render_dashboard
from agent_readiness.serializer import serialize_report
from agent_readiness.types import ReportData

logger = logging.getLogger("agent_readiness.server")

DEFAULT_HOST = "127.0.0.1"


def create_app(report: ReportData | dict[str, Any]) -> FastAPI:
    """FastAPI app bound to a single serialized report."""
    payload = report if isinstance(report, dict) else serialize_report(report)

    app = FastAPI(
        title="Agent Readiness Report",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.report = payload
    app.state.html = render_dashboard(payload)

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(request: Request) -> str:
        """Serve the report dashboard."""
        return request.app.state.html

    @app.get("/api/report")
    async def api_report(request: Request) -> JSONResponse:
        return JSONResponse(request.app.state.report)

    return app


def find_free_port(host: str = DEFAULT_HOST) -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


def serve_report(
    report: ReportData | dict[str, Any],
    host: str = DEFAULT_HOST,
    port: int | None = None,
    open_browser: bool = True,
) -> None:
    """Serve the dashboard until interrupted. Blocks."""
    port = port or find_free_port(host)
    url = f"http://{host}:{port}"
    app = create_app(report)

    if open_browser:
        # Give uvicorn a moment to bind before the browser hits it
        threading.Timer(0.8, webbrowser.open, args=(url,)).start()

    logger.info("Serving report at %s", url)
    uvicorn.run(app, host=host, port=port, log_level="warning")

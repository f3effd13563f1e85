# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""
agent-readiness — HTML Dashboard.

Single-file report page. The template lives in templates/dashboard.html
and draws everything client-side from ``window.__READINESS_REPORT__``,
so the output needs no build step and no network access.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from agent_readiness.serializer import serialize_report
from agent_readiness.types import ReportData

_TEMPLATE_DIR = Path(__file__).parent / "templates"
_TEMPLATE_CACHE: str | None = None

REPORT_GLOBAL = "__READINESS_REPORT__"


def get_dashboard_template() -> str:
    """Return the dashboard template, loaded once and cached."""
    global _TEMPLATE_CACHE  # noqa: PLW0603
    if _TEMPLATE_CACHE is None:
        template_path = _TEMPLATE_DIR / "dashboard.html"
        _TEMPLATE_CACHE = template_path.read_text(encoding="utf-8")
    return _TEMPLATE_CACHE


def _script_safe_json(payload: dict[str, Any]) -> str:
    # "</script>" inside a string literal would end the script block
    return json.dumps(payload, ensure_ascii=False).replace("</", "<\\/")


def render_dashboard(report: ReportData | dict[str, Any]) -> str:
    """Dashboard HTML with the report embedded.

    Accepts either a ``ReportData`` or an already serialized report.
    """
    payload = report if isinstance(report, dict) else serialize_report(report)
    script = f"<script>window.{REPORT_GLOBAL} = {_script_safe_json(payload)};</script>\n"
    return get_dashboard_template().replace("</head>", script + "</head>", 1)

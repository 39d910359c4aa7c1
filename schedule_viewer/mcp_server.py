"""schedule-viewer MCP server.

Exposes tools to analyze solver solution files, list the schedules of a case,
analyze a stored schedule, and compare several schedules side by side.
"""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from solution_core.io.reader import load_solution_file
from solution_core.io.writer import solution_to_view
from solution_core.parser import parse_solution
from solution_core.preferences import violated_wishes

from .config import RuntimeConfig, load_env, require_case_id, runtime_config
from .schedule_client import ReadOnlyScheduleClient

mcp = FastMCP(
    "schedule-viewer",
    host=os.getenv("HOST", "127.0.0.1"),
    port=int(os.getenv("PORT", "8000")),
    instructions=(
        "Analysis of shift schedules produced by an external solver. "
        "Decodes solution documents, reports honored and violated wishes, "
        "per-employee hours and overtime, and compares several solver runs. "
        "All schedule service access is read-only."
    ),
)

_ENV_FILE: str | None = None
_CLIENT: ReadOnlyScheduleClient | None = None


def _config() -> RuntimeConfig:
    load_env(_ENV_FILE or os.getenv("SCHEDULE_VIEWER_ENV_FILE"))
    return runtime_config()


def _client() -> ReadOnlyScheduleClient:
    global _CLIENT
    if _CLIENT is None:
        cfg = _config()
        _CLIENT = ReadOnlyScheduleClient(
            base_url=cfg.base_url, timeout_s=cfg.timeout_s, retries=cfg.retries,
        )
    return _CLIENT


def _analyze(document: dict[str, Any], shift_wish_policy: str | None) -> dict[str, Any]:
    cfg = _config()
    policy = shift_wish_policy or cfg.shift_wish_policy
    solution = parse_solution(document, shift_wish_policy=policy)
    view = solution_to_view(solution, tolerance_hours=cfg.overtime_tolerance_hours)
    view["violated_wishes"] = {
        str(emp_id): v for emp_id, v in violated_wishes(solution, policy=policy).items()
    }
    return view


# -- Analysis --

@mcp.tool()
def analyze_solution_file(path: str, shift_wish_policy: str | None = None) -> dict[str, Any]:
    """Analyze a solver solution JSON file from disk.

    Returns the schedule view: per-employee cells with assigned shifts, wish
    annotations, blocked days, hours vs. target and overtime flags.
    """
    document = load_solution_file(Path(path).expanduser())
    return _analyze(document, shift_wish_policy)


# -- Schedule service --

@mcp.tool()
def list_schedules(case_id: int | None = None) -> dict[str, Any]:
    """List generated schedules of a case with seeds and quality counters."""
    case = require_case_id(case_id, _config())
    metadata = _client().fetch_schedules_metadata(case)
    return {
        "selected_schedule_id": metadata.selected_schedule_id,
        "schedules": [
            {
                "schedule_id": m.schedule_id,
                "seed": m.seed,
                "generated_at": m.generated_at,
                "is_selected": m.is_selected,
                "comment": m.comment,
                "stats": m.stats.as_dict(),
            }
            for m in metadata.schedules
        ],
    }


@mcp.tool()
def analyze_schedule(
    schedule_id: str | None = None,
    case_id: int | None = None,
    shift_wish_policy: str | None = None,
) -> dict[str, Any]:
    """Analyze a stored schedule (the selected one if schedule_id is omitted)."""
    case = require_case_id(case_id, _config())
    client = _client()
    if schedule_id:
        document = client.fetch_solution(case, schedule_id)
    else:
        schedule_id = client.fetch_schedules_metadata(case).selected_schedule_id
        document = client.fetch_selected_solution(case)
    if document is None:
        return {"schedule_id": schedule_id, "solution": None}
    view = _analyze(document, shift_wish_policy)
    view["schedule_id"] = schedule_id
    return view


@mcp.tool()
async def compare_schedules(
    schedule_ids: list[str],
    query: str | None = None,
    case_id: int | None = None,
    shift_wish_policy: str | None = None,
) -> dict[str, Any]:
    """Compare several schedules employee by employee.

    Fetches all schedules concurrently; if any fetch fails the whole
    comparison fails. `query` filters employees by name, level or id.
    """
    from .compare import compare_schedules_impl, tag_solutions

    cfg = _config()
    case = require_case_id(case_id, cfg)
    metadata, documents = await _client().fetch_comparison(case, list(schedule_ids))
    tagged = tag_solutions(
        documents, metadata, shift_wish_policy=shift_wish_policy or cfg.shift_wish_policy,
    )
    return compare_schedules_impl(
        tagged, query=query, tolerance_hours=cfg.overtime_tolerance_hours,
    )


# -- Server entrypoints --

async def _run_http() -> None:
    import uvicorn
    from starlette.middleware.base import BaseHTTPMiddleware
    from starlette.responses import JSONResponse, PlainTextResponse
    from starlette.routing import Route

    api_key = os.getenv("MCP_API_KEY")

    class BearerAuth(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            if request.url.path == "/health":
                return await call_next(request)
            auth = request.headers.get("authorization", "")
            if not auth.startswith("Bearer ") or auth[7:] != api_key:
                return JSONResponse({"error": "unauthorized"}, status_code=401)
            return await call_next(request)

    starlette_app = mcp.streamable_http_app()

    if api_key:
        starlette_app.add_middleware(BearerAuth)

    starlette_app.routes.append(
        Route("/health", lambda r: PlainTextResponse("ok"))
    )

    config = uvicorn.Config(
        starlette_app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level="info",
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    global _ENV_FILE

    parser = argparse.ArgumentParser(description="Run schedule-viewer MCP server")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument(
        "--transport",
        default=None,
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: streamable-http when PORT is set, else stdio)",
    )
    args = parser.parse_args()
    _ENV_FILE = args.env_file

    logging.basicConfig(
        level=_config().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    transport = args.transport
    if transport is None:
        transport = "streamable-http" if os.getenv("PORT") else "stdio"

    if transport == "streamable-http":
        import anyio
        anyio.run(_run_http)
    else:
        mcp.run(transport=transport)


if __name__ == "__main__":
    main()

# src/nextup/connectors/http_connector.py

from __future__ import annotations

"""
HTTP connector.

Thin FastAPI layer over tasks.task_api. Routing, CORS and status codes live
here; ranking and storage do not.

Endpoints:
  GET    /health
  GET    /tasks          all tasks, unordered
  POST   /tasks          create or replace (JSON Task record)
  DELETE /tasks/{id}     id is everything after /tasks/, slashes included
  GET    /order          ranked list   (?freeMin=&stress=)
  GET    /next           best task or 204
"""

import json
import logging
import threading
import time
from dataclasses import dataclass

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import QueryContext, Task

logger = logging.getLogger(__name__)


def _atoi(raw: str | None) -> int:
    """Lenient integer query parameter: anything unparseable reads as 0 (then defaults apply)."""
    if raw is None:
        return 0
    try:
        return int(raw.strip())
    except ValueError:
        return 0


def _context_from_request(request: Request) -> QueryContext:
    q = request.query_params
    return QueryContext.build(
        free_minutes=_atoi(q.get("freeMin")),
        stress_level=_atoi(q.get("stress")),
    )


def create_app(state: AppState) -> FastAPI:
    app = FastAPI(title="nextup", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/health", response_class=PlainTextResponse)
    def health() -> str:
        return "OK"

    @app.get("/tasks")
    def get_tasks():
        return [t.to_dict() for t in task_api.all_tasks(state)]

    @app.post("/tasks")
    async def post_task(request: Request) -> Response:
        try:
            payload = json.loads(await request.body())
            task = Task.from_dict(payload)
            result = task_api.upsert_task(state, task)
        except ValueError as e:
            # JSONDecodeError and InvalidTask are both ValueErrors.
            logger.debug("Rejected task payload: %s", e)
            return PlainTextResponse(str(e), status_code=400)
        return JSONResponse(result.to_dict())

    @app.delete("/tasks/{task_id:path}")
    def remove_task(task_id: str):
        return task_api.delete_task(state, task_id).to_dict()

    @app.get("/order")
    def order(request: Request):
        ctx = _context_from_request(request)
        return [t.to_dict() for t in task_api.list_tasks(state, ctx)]

    @app.get("/next")
    def next_(request: Request) -> Response:
        ctx = _context_from_request(request)
        best = task_api.next_task(state, ctx)
        if best is None:
            return Response(status_code=204)
        return JSONResponse(best.to_dict())

    return app


@dataclass
class HttpBackgroundRunner:
    thread: threading.Thread
    server: uvicorn.Server

    def is_alive(self) -> bool:
        return self.thread.is_alive()

    def stop(self) -> None:
        self.server.should_exit = True

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_http_in_background(
    state: AppState, *, startup_timeout: float = 10.0
) -> HttpBackgroundRunner | None:
    """
    Serve the API from a background thread so the console REPL can share the process.

    Returns None when the server could not start (port in use, bad host).
    """
    settings = state.settings
    config = uvicorn.Config(
        create_app(state),
        host=settings.host,
        port=int(settings.port),
        log_config=None,  # keep our handlers from logging_setup
    )
    server = uvicorn.Server(config)

    def runner() -> None:
        try:
            server.run()
        except SystemExit:
            # uvicorn exits this way when it cannot bind.
            logger.error("HTTP server failed to start on %s:%s", settings.host, settings.port)

    t = threading.Thread(target=runner, name="nextup-http", daemon=True)
    t.start()

    deadline = time.monotonic() + startup_timeout
    while not server.started and t.is_alive() and time.monotonic() < deadline:
        time.sleep(0.05)

    if not server.started:
        server.should_exit = True
        logger.error("HTTP server did not start.")
        return None

    logger.info("Listening on %s:%s", settings.host, settings.port)
    return HttpBackgroundRunner(thread=t, server=server)

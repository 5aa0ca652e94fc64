from __future__ import annotations

import os
import platform
import uuid
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from .config import SimulatorConfig, apply_config
from .logger import log_event, tail_events
from .sample import SAMPLE_GRAPH, SAMPLE_LAYOUT
from .session import SessionView, SimulatorSession


APP_VERSION = "0.1.0"


class EdgeModel(BaseModel):
    src: str
    dst: str
    weight: int


class GraphResponse(BaseModel):
    nodes: List[str]
    source: str
    edges: List[EdgeModel]
    layout: Dict[str, List[int]]


class LabelsModel(BaseModel):
    iteration: str
    step: str
    status: str
    distances: Dict[str, str]


class MessageModel(BaseModel):
    level: str
    text: str


class ViewResponse(BaseModel):
    phase: str
    iteration: int
    iteration_bound: int
    edge_cursor: int
    distances: Dict[str, Optional[int]]
    active_edge: Optional[List[str]] = None
    active_edge_index: Optional[int] = None
    has_negative_cycle: bool
    step_count: int
    running: bool
    can_start: bool
    can_next: bool
    changed: List[str]
    labels: LabelsModel
    message: Optional[MessageModel] = None


def _respond(view: SessionView) -> ViewResponse:
    return ViewResponse(**view.to_dict())


def create_app(config: Optional[SimulatorConfig] = None) -> FastAPI:
    """Build an API app owning exactly one simulator session."""
    if config is not None:
        apply_config(config)
    run_id = os.environ.get("BFS_RUN_ID", str(uuid.uuid4()))
    app = FastAPI(title="Bellman-Ford Step Simulator API", version=APP_VERSION)
    app.state.session = SimulatorSession(SAMPLE_GRAPH)
    app.state.run_id = run_id

    def session_of(request: Request) -> SimulatorSession:
        return request.app.state.session

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        req_id = str(uuid.uuid4())
        log_event("http_request", method=request.method, path=request.url.path, request_id=req_id, run_id=run_id)
        response = await call_next(request)
        response.headers["X-Request-Id"] = req_id
        response.headers["X-Run-Id"] = run_id
        log_event("http_response", path=request.url.path, status=response.status_code, request_id=req_id, run_id=run_id)
        return response

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/status")
    def status(request: Request):
        view = session_of(request).view()
        info: Dict[str, Any] = {
            "status": "ok",
            "version": APP_VERSION,
            "run_id": run_id,
            "python": platform.python_version(),
            "session": session_of(request).session_id,
            "phase": view.snapshot.phase.value,
            "running": view.running,
        }
        return info

    @app.get("/api/graph", response_model=GraphResponse)
    def graph(request: Request):
        g = session_of(request).graph
        data = g.to_dict()
        layout = {n: list(SAMPLE_LAYOUT[n]) for n in g.nodes if n in SAMPLE_LAYOUT}
        return GraphResponse(**data, layout=layout)

    @app.get("/api/state", response_model=ViewResponse)
    def state(request: Request):
        return _respond(session_of(request).view())

    @app.post("/api/start", response_model=ViewResponse)
    def start(request: Request):
        return _respond(session_of(request).start())

    @app.post("/api/next", response_model=ViewResponse)
    def next_step(request: Request):
        session = session_of(request)
        if not session.running:
            raise HTTPException(status_code=409, detail="simulation not started")
        return _respond(session.next())

    @app.post("/api/reset", response_model=ViewResponse)
    def reset(request: Request):
        return _respond(session_of(request).reset())

    @app.get("/api/logs/tail")
    def logs_tail(limit: int = 200):
        """Return the last N lines from the structured events log."""
        try:
            return {"lines": tail_events(limit)}
        except OSError as exc:
            raise HTTPException(status_code=500, detail=str(exc))

    return app


app = create_app()

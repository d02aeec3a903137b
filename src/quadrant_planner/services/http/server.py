from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ...domain import Event
from ...errors import ValidationError
from ...orchestrator import describe_schedule
from ..context import AppContext
from .models import CommandRequest, EventCreateRequest, SettingsPayload, SettingsUpdateRequest

logger = logging.getLogger(__name__)


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    ctx = context or AppContext()
    app = FastAPI(title="Quadrant Planner Local API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.context = ctx

    @app.post("/api/command")
    def process_command(request: CommandRequest) -> JSONResponse:
        outcome = ctx.pipeline.process_command(request.text, request.schedule)
        logger.debug("Command %r finished with %s", request.text, outcome.status.value)
        return JSONResponse(outcome.to_dict())

    @app.get("/api/events")
    def list_events() -> JSONResponse:
        return JSONResponse({"events": [event.to_record() for event in ctx.store.list_all()]})

    @app.post("/api/events", status_code=201)
    def create_event(request: EventCreateRequest) -> JSONResponse:
        try:
            event = ctx.store.add(Event.from_record(request.to_record()))
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return JSONResponse({"event": event.to_record()}, status_code=201)

    @app.patch("/api/events/{event_id}")
    def update_event(event_id: str, fields: Dict[str, Any] = Body(...)) -> JSONResponse:
        updated = ctx.store.update(event_id, fields)
        if updated is None:
            raise HTTPException(status_code=404, detail=f"Event '{event_id}' not found.")
        return JSONResponse({"event": updated.to_record()})

    @app.delete("/api/events/{event_id}")
    def delete_event(event_id: str) -> JSONResponse:
        if not ctx.store.delete(event_id):
            raise HTTPException(status_code=404, detail=f"Event '{event_id}' not found.")
        return JSONResponse({"deleted": event_id})

    @app.get("/api/schedule")
    def schedule_description() -> JSONResponse:
        return JSONResponse({"description": describe_schedule(ctx.store.list_all())})

    @app.get("/api/settings")
    def read_settings() -> JSONResponse:
        return JSONResponse(SettingsPayload.from_settings(ctx.transport.current_config()).model_dump())

    @app.put("/api/settings")
    def save_settings(request: SettingsUpdateRequest) -> JSONResponse:
        settings = ctx.save_llm_settings(request.model_dump(exclude_none=True))
        return JSONResponse(SettingsPayload.from_settings(settings).model_dump())

    return app


def run_local_server(host: str = "127.0.0.1", port: int = 8000, *, context: Optional[AppContext] = None) -> None:
    import asyncio

    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving Quadrant Planner API on %s:%s", host, port)
    asyncio.run(serve(create_app(context), config))

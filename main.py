"""Status API for the Local Stack Focus agent.

Run with ``uvicorn main:app``; the agent loop starts on application startup.
"""
from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query

from lsf import journal
from lsf.api_models import StatusOut
from lsf.runtime import RuntimeState
from lsf.scheduler import Agent
from lsf.settings import StackConfig, load_config

app = FastAPI(title="Local Stack Focus")

runtime = RuntimeState()
config: StackConfig | None = None
agent: Agent | None = None


def start_agent() -> None:
    global config, agent
    config = load_config()
    agent = Agent(config, runtime=runtime)
    agent.start()


@app.on_event("startup")
def startup() -> None:
    start_agent()


@app.on_event("shutdown")
def shutdown() -> None:
    if agent is not None:
        agent.stop()


@app.get("/health")
def health():
    status = runtime.snapshot()
    if not status.running:
        raise HTTPException(status_code=503, detail=status.fatal_error or "agent not running")
    return {"status": "healthy", "ticks": status.ticks}


@app.get("/status", response_model=StatusOut)
def get_status():
    if config is None:
        raise HTTPException(status_code=503, detail="agent not configured")
    return StatusOut.build(config, runtime.snapshot())


@app.get("/events")
def get_events(limit: int = Query(100, ge=1, le=1000)):
    return journal.latest_events(limit)

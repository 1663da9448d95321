"""FastAPI application that gathers Beat metrics on every scrape."""
from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException

from .accumulator import MemoryAccumulator
from .config import DESCRIPTION
from .errors import BeatError
from .plugin import Beat


def create_app(beat: Optional[Beat] = None) -> FastAPI:
    beat = beat or Beat()
    # one cycle at a time per Beat instance
    lock = threading.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Close the cached HTTP session on shutdown."""
        yield
        beat.close()

    app = FastAPI(
        title="Beat Stats Service",
        description=DESCRIPTION,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.beat = beat

    @app.get("/metrics", summary="Gather and return the current Beat metrics", tags=["beat"])
    def beat_metrics():
        accumulator = MemoryAccumulator()
        with lock:
            try:
                beat.gather(accumulator)
            except BeatError as exc:
                raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"measurements": [item.as_dict() for item in accumulator.measurements]}

    @app.get("/health", summary="Service health check", tags=["system"])
    async def health():
        return {"status": "ok"}

    return app

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from journal_backend.db_init import init_db
from journal_backend.routes import checkin, children, entries, parents, stats
from journal_backend.stats import MalformedInputError


def create_app(init_database: bool = True) -> FastAPI:
    logging.basicConfig(
        level=os.getenv("BACKEND_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = FastAPI(title="Parenting Journal API", version="0.1.0")

    app.include_router(stats.router)
    app.include_router(entries.router)
    app.include_router(children.router)
    app.include_router(parents.router)
    app.include_router(checkin.router)

    if init_database:
        @app.on_event("startup")
        async def _startup():
            await init_db()

    @app.exception_handler(MalformedInputError)
    async def _malformed_record_handler(request: Request, exc: MalformedInputError):
        logging.getLogger("journal_backend").error(
            "Malformed journal record on %s: %s", request.url.path, exc
        )
        return JSONResponse(status_code=500, content={"detail": "Failed to compute journal statistics"})

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("journal_backend").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()

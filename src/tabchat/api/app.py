"""FastAPI application factory."""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tabchat.config import settings
from tabchat.domain.exceptions import NotFoundError


def create_app(data_dir: Path | str | None = None) -> FastAPI:
    resolved_dir = Path(data_dir) if data_dir is not None else settings.data_dir

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from tabchat.infra.db.store import TabularStore
        from tabchat.ingest.loader import ingest

        store = TabularStore(resolved_dir)
        app.state.store = store
        ingest(store)
        yield
        store.dispose()

    app = FastAPI(
        title="Tabchat Analytics API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from tabchat.api.routers.agent import router as agent_router
    from tabchat.api.routers.data import router as data_router
    from tabchat.api.routers.execute import router as execute_router
    from tabchat.api.routers.status import router as status_router

    app.include_router(data_router)
    app.include_router(execute_router)
    app.include_router(agent_router)
    app.include_router(status_router)

    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app

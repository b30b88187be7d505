"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from aiusage.config import settings
from aiusage.domain.exceptions import NotFoundError, ConflictError, ValidationError


def create_app(max_workers: int | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from aiusage.infra.db.engine import engine  # triggers WAL pragma + mapper registration
        from aiusage.ingest.pool import IngestionWorkerPool
        SQLModel.metadata.create_all(engine)
        app.state.worker_pool = IngestionWorkerPool(max_workers or settings.INGEST_MAX_WORKERS)
        try:
            yield
        finally:
            app.state.worker_pool.shutdown(wait=True)

    app = FastAPI(
        title="AI Usage Ingestion API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from aiusage.api.routers.ingest import router as ingest_router
    from aiusage.api.routers.usage import router as usage_router

    app.include_router(usage_router)
    app.include_router(ingest_router)

    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(ConflictError)
    def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.message})

    @app.exception_handler(ValidationError)
    def _bad_request(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app

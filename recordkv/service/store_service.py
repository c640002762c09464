"""
Store Service

FastAPI application exposing an embedded transactional store over HTTP so
that HttpTransactionalStore clients in other processes can share it.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from recordkv.adapter.config import get_config
from recordkv.base.exceptions import RecordKVException, StoreClosedError
from recordkv.base.program import from_wire
from recordkv.base.store import TransactionalStore
from recordkv.impl.embedded_store import EmbeddedTransactionalStore
from recordkv.service.models import ExecuteRequest, ExecuteResponse

logger = logging.getLogger(__name__)


def create_app(store: Optional[TransactionalStore] = None) -> FastAPI:
    """
    Create the store service application.

    Args:
        store: Store to serve. If omitted, the lifespan opens an
            EmbeddedTransactionalStore from configuration and closes it
            (saving its snapshot) on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        opened = None
        if app.state.store is None:
            config = get_config()
            logger.info("Starting store service: snapshot=%s", config.snapshot_path)
            opened = EmbeddedTransactionalStore(snapshot_path=config.snapshot_path)
            app.state.store = opened

        yield

        if opened is not None:
            logger.info("Shutting down store service...")
            opened.close()
            app.state.store = None
            logger.info("Store service shut down complete")

    app = FastAPI(
        title="recordkv store service",
        description="Atomic execution of transaction programs against an embedded store",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store

    @app.exception_handler(RecordKVException)
    async def recordkv_exception_handler(request: Request, exc: RecordKVException):
        """Handle recordkv exceptions."""
        logger.error(
            f"Store exception: {exc.message}",
            extra={"status_code": exc.status_code}
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict()
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        logger.error(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation error",
                "details": str(exc.errors())
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "details": str(exc)
            }
        )

    @app.get("/")
    def root():
        return {
            "service": "recordkv store",
            "status": "running",
            "version": "1.0.0"
        }

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/execute", response_model=ExecuteResponse)
    def execute(req: ExecuteRequest, request: Request):
        store = request.app.state.store
        if store is None:
            raise StoreClosedError(details="store service has no open store")
        program = from_wire(req.program)
        result = store.execute(program)
        return ExecuteResponse(ok=True, text=result.extract_text())

    return app


app = create_app()


# CLI entrypoint
if __name__ == "__main__":
    config = get_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    uvicorn.run(
        "recordkv.service.store_service:app",
        host=config.service_host,
        port=config.service_port,
        reload=False,
        log_level=config.log_level.lower()
    )

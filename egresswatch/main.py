"""egresswatch - external traffic intent tracking server."""

import asyncio
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from loguru import logger

from egresswatch.config import settings
from egresswatch.engine import IntentEngine
from egresswatch.schemas import ExternalTrafficIntent, IntentRecord
from egresswatch.store import IntentStore
from egresswatch.utils import configure_logging


def create_app(engine: Optional[IntentEngine] = None) -> FastAPI:
    """Build the API. Without an engine, one is created from settings at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        owned = engine is None
        if owned:
            store = IntentStore.from_settings(settings.db, settings.store.retention_days)
            app.state.engine = IntentEngine.from_settings(settings, store)
        else:
            app.state.engine = engine
        yield
        # Shutdown
        await app.state.engine.close()
        if owned:
            app.state.engine.store.close()

    app = FastAPI(
        title="egresswatch",
        description="Tracks workloads talking to external DNS destinations",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.post("/api/intents")
    async def post_intents(intents: List[ExternalTrafficIntent], request: Request):
        """Process a batch of observed intents."""
        new = await request.app.state.engine.process_batch(intents)
        return {"received": len(intents), "new": [p.model_dump() for p in new]}

    @app.get("/api/intents", response_model=List[IntentRecord])
    async def get_intents(request: Request):
        """Get stored intents, most recently seen first."""
        store = request.app.state.engine.store
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, store.list_all)

    @app.get("/api/status")
    async def get_status(request: Request):
        """Get system status."""
        engine = request.app.state.engine
        return {
            "status": "running",
            "cluster": settings.cluster,
            "dispatch_enabled": engine.notifier is not None,
            "cached_days": [d.isoformat() for d in engine.store.cache.days()],
        }

    return app


def main():
    """Run the server."""
    import uvicorn

    configure_logging(settings.log_level)
    logger.info("Starting egresswatch server...")
    logger.info(f"Server available at http://{settings.server.host}:{settings.server.port}")
    logger.info(f"Dispatch enabled: {settings.dispatch.enabled}")

    uvicorn.run(
        create_app(),
        host=settings.server.host,
        port=settings.server.port,
    )


if __name__ == "__main__":
    main()

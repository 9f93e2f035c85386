"""
Agency OS API Server - REST API for the operations dashboard.
"""
# ruff: noqa: S104
# S104: Development server binding (guarded by __name__ check)

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agency_os import __version__, config
from agency_os.contracts import get_thresholds
from agency_os.observability import CorrelationIdMiddleware, configure_logging
from agency_os.persistence import PersistenceBridge, RemoteStore
from agency_os.state_store import init_store

from api.agency_router import router

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    # Dev default: allow all origins; Production: set CORS_ORIGINS to comma-separated list
    if config.CORS_ORIGINS == "*":
        return ["*"]
    return [o.strip() for o in config.CORS_ORIGINS.split(",") if o.strip()]


def create_app(bridge: PersistenceBridge | None = None, bootstrap: bool = True) -> FastAPI:
    """
    Build the API application.

    Args:
        bridge: persistence bridge; a local store plus the configured remote
            store when None
        bootstrap: load the snapshot and install the state store on startup.
            Tests pass False and call init_store() themselves.
    """
    if bridge is None and bootstrap:
        remote = RemoteStore() if config.remote_configured() else None
        bridge = PersistenceBridge(remote=remote)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if bootstrap:
            # Load local state, merge the remote read, install the store
            logger.info("=== Agency OS Startup ===")
            snapshot = bridge.startup()
            init_store(snapshot, on_change=bridge.save, thresholds=get_thresholds())
            logger.info(
                f"Loaded {len(snapshot.clients)} clients, {len(snapshot.tasks)} tasks, "
                f"{len(snapshot.posts)} posts"
            )
        yield

    app = FastAPI(
        title="Agency OS API",
        description="Agency operations dashboard - clients, fulfillment, content, knowledge",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    app.state.bridge = bridge
    return app


def main(host: str = "0.0.0.0", port: int = 8420) -> None:
    configure_logging(config.LOG_LEVEL)
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()

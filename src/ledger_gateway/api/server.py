# File: src/ledger_gateway/api/server.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledger_gateway.config.gateway_config import GatewayConfig
from ledger_gateway.explorer.api import ExplorerAPI
from ledger_gateway.explorer.network_status import NetworkStatusUpdater
from ledger_gateway.monitoring.metrics import MetricsCollector
from ledger_gateway.monitoring.supervisor import Supervisor
from ledger_gateway.storage.database import Database
from ledger_gateway.storage.pool import ConnectionPool
from ledger_gateway.utils.config import Config
from ledger_gateway.utils.logger import get_logger
from .routes import explorer_router

logger = get_logger(__name__)


def build_pool(config: GatewayConfig) -> ConnectionPool:
    db_path = config.get("storage.db_path")
    return ConnectionPool(
        lambda: Database(db_path),
        max_size=config.get("storage.pool_size", Config.DEFAULT_POOL_SIZE)
    )


def create_app(
    config: Optional[GatewayConfig] = None,
    pool: Optional[ConnectionPool] = None,
    supervisor: Optional[Supervisor] = None,
    metrics: Optional[MetricsCollector] = None,
    start_updater: bool = True
) -> FastAPI:
    """Create the gateway application.

    The status updater and supervisor run for the lifetime of the app and are
    started and stopped by its lifespan. Pass `start_updater=False` to serve
    the zero-valued snapshot without touching storage in the background.
    """
    config = config or GatewayConfig.from_dict({})
    pool = pool or build_pool(config)
    supervisor = supervisor or Supervisor()

    updater = NetworkStatusUpdater(
        pool,
        interval_ms=config.get("status.refresh_interval_ms", Config.STATUS_REFRESH_INTERVAL_MS),
        panic_notify=supervisor.events,
        metrics=metrics
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        supervisor.start()
        if start_updater:
            updater.start()
        yield
        updater.stop()
        supervisor.stop()
        pool.close()

    app = FastAPI(title="Ledger REST gateway", lifespan=lifespan)
    app.state.config = config
    app.state.pool = pool
    app.state.supervisor = supervisor
    app.state.updater = updater
    app.state.explorer = ExplorerAPI(
        pool,
        updater.status,
        contract_address=config.get("testnet.contract_address"),
        metrics=metrics
    )

    # Permissive CORS, no credentials so the wildcard is sent verbatim
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
        max_age=Config.CORS_MAX_AGE,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "Bad request"})

    app.include_router(explorer_router, prefix=config.get("api.prefix", Config.API_PREFIX))

    # Reachability probe for web clients
    @app.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=200)

    return app

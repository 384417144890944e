"""FastAPI application factory."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import load_config
from core.errors import MalformedInput
from core.health import HealthChecker, create_counter_check, create_seed_check
from identifier import get_generator
from internal.logging import LogLevel, StructuredLogger
from service.routes import health, xids
from utils.crash import create_async_handler

VERSION = "1.0.0"


def create_app(config=None, generator=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()
    generator = generator or get_generator()

    logger = StructuredLogger.configure(min_level=LogLevel.parse(config.logging.level)).bind(component="service")
    health_checker = HealthChecker()
    health_checker.register("identity_seed", create_seed_check(generator.seed), critical=True)
    health_checker.register("counter", create_counter_check(generator.counter), critical=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting", version=VERSION)
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(create_async_handler(logger))
        logger.info(
            "Application started",
            machine=generator.seed.machine().hex(),
            process=generator.seed.process(),
        )
        yield
        logger.info("Application shutdown complete", issued=generator.counter.issued)

    app = FastAPI(
        title="XID Service",
        version=VERSION,
        description="globally unique, time-sortable identifiers",
        lifespan=lifespan,
    )

    xids.init(generator, config.generator.max_batch)
    health.init(generator, health_checker)

    app.include_router(xids.router)
    app.include_router(health.router)

    @app.exception_handler(MalformedInput)
    async def malformed_input(request: Request, exc: MalformedInput):
        logger.warn("Malformed input", error=exc.message, error_id=exc.error_id, path=request.url.path)
        return JSONResponse(content=exc.to_dict(), status_code=400)

    return app

import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from gamecenter.core.clock import SystemClock
from gamecenter.core.errors import ServiceError
from gamecenter.db.init_db import create_database
from gamecenter.db.base import Base
from gamecenter.db.session import engine, SessionLocal
from gamecenter.core.config import settings
from gamecenter.api.v1.router import api_router
from gamecenter.utils.sweeps import run_daily_maintenance, run_status_sweep, seconds_until_hour

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

_clock = SystemClock()


async def _status_sweep_loop() -> None:
    """Background task: bring booking statuses in line with the clock every few seconds."""
    while True:
        try:
            db = SessionLocal()
            try:
                result = run_status_sweep(db, _clock.now())
                if result.updated:
                    logger.info("Status sweep updated %d booking(s).", result.updated)
            finally:
                db.close()
        except Exception:
            logger.exception("Error during status sweep.")
        await asyncio.sleep(settings.STATUS_SWEEP_INTERVAL_SECONDS)


async def _daily_maintenance_loop() -> None:
    """Background task: archive terminal bookings and apply retention once a day."""
    while True:
        await asyncio.sleep(seconds_until_hour(_clock.now(), settings.DAILY_SWEEP_HOUR))
        try:
            db = SessionLocal()
            try:
                counts = run_daily_maintenance(db, _clock.now())
                logger.info("Daily maintenance finished: %s", counts)
            finally:
                db.close()
        except Exception:
            logger.exception("Error during daily maintenance.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists and create tables
    create_database()
    Base.metadata.create_all(bind=engine)

    tasks = []
    if settings.ENABLE_BACKGROUND_SWEEPS:
        tasks.append(asyncio.create_task(_status_sweep_loop()))
        tasks.append(asyncio.create_task(_daily_maintenance_loop()))
    yield

    # Shutdown: cancel background tasks
    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass


from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Internal server error"},
    )


app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
def read_root():
    return {"Hello": "Gaming Center POS"}

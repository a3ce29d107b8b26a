import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings
from app.database import init_db
from app.drip.router import router as drip_router
from app.holidays.router import router as holidays_router
from shared.database.redis_client import close_redis_client, get_redis_client
from shared.middleware.error_handler import error_envelope_middleware
from shared.middleware.request_id import RequestIdLogFilter, request_id_middleware


def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s:%(name)s:[%(request_id)s] %(message)s",
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestIdLogFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.drip_database_url)

    # Redis holds the process-wide holiday cache
    app.state.redis = get_redis_client(settings.redis_url) if settings.redis_enabled else None

    yield

    # Shutdown
    await close_redis_client(app.state.redis)


SWAGGER_DESCRIPTION = """\
## Drip Content Unlock Engine

Decides which topics of a course a student can open today.
Topics are released one per working day (Mon–Fri, minus admin
holidays) counted from the student's reference date.

### Domain Tags

| Tag | Description |
|-----|-------------|
| **Drip** | Per-student unlock resolution, enable/disable drip per course |
| **Holidays** | Global calendar of days that do not advance drip |

### Reference date

The enrollment date, unless the student's batch started earlier,
in which case the batch start date.

### Fail-open reasons

```
EMPTY_COURSE        course has no topics
NO_DRIP_CONFIGURED  no topic carries an unlock order → everything unlocked
NO_BATCH            student has no active batch → everything unlocked
OK                  drip applied
```
"""


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Drip Content Unlock Engine",
        version="0.1.0",
        description=SWAGGER_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)

    app.include_router(drip_router, prefix="/api/v1")
    app.include_router(holidays_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "service": "drip"}

    return app


app = create_app()

from __future__ import annotations

from datetime import datetime, timezone
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from sqlalchemy import text
from starlette.middleware.cors import CORSMiddleware

from .config import settings
from .db import check_db_connection, current_dialect, get_db, get_engine, init_db
from .logging_utils import configure_logging
from .metrics import CONTENT_TYPE_LATEST, REQUESTS_TOTAL, generate_latest
from .routers.auth import router as auth_router
from .routers.classify import router as classify_router
from .routers.seed import router as seed_router
from .seeding import seed_database

load_dotenv()
configure_logging()
logger = logging.getLogger("muac.app")

app = FastAPI(title="MUAC API", version="1.0.0")


@app.on_event("startup")
async def startup_event() -> None:
    check_db_connection()
    if not settings.auto_bootstrap:
        logger.info("Automatic bootstrap disabled", extra={"event": "startup_skip_bootstrap"})
        return

    created = init_db()
    report = seed_database(get_engine())
    if report.generated_password is not None:
        logger.warning(
            "Administrator password was generated and is not shown here; "
            "set ADMIN_PASSWORD or bootstrap with migrate.py to obtain it",
            extra={"event": "admin_password_generated"},
        )
    logger.info(
        "Backend startup complete",
        extra={
            "event": "startup",
            "mode": report.mode,
            "status": "schema_created" if created else "schema_present",
            "dialect": current_dialect().value,
            "db_backend": get_engine().dialect.name,
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_metrics_middleware(request: Request, call_next):
    response = await call_next(request)
    REQUESTS_TOTAL.labels(method=request.method, path=request.url.path, status=str(response.status_code)).inc()
    return response


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    with get_db() as session:
        session.execute(text("SELECT 1"))
    return {"status": "ok", "ts": datetime.now(timezone.utc).isoformat()}


@app.get("/metrics")
async def metrics() -> Response:
    if not settings.enable_prometheus_metrics:
        raise HTTPException(status_code=404, detail="Metrics disabled")
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(auth_router)
app.include_router(seed_router)
app.include_router(classify_router)

from __future__ import annotations

from dataclasses import asdict
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..config import settings
from ..db import get_engine
from ..errors import BootstrapError, SeedError, ValidationError
from ..schemas import CleanupResponse, SeedingStatusResponse, SeedRunResponse, ValidationResponse
from ..security import AuthContext, require_admin
from ..seeding import CLEANUP_ORDER, clean_seed_data, get_seeding_status, seed_database, validate_seed_data

router = APIRouter(prefix="/api/seed", tags=["seed"])
logger = logging.getLogger("muac.seed.api")


@router.get("/status", response_model=SeedingStatusResponse)
async def seeding_status() -> SeedingStatusResponse:
    status = get_seeding_status(get_engine())
    return SeedingStatusResponse(**asdict(status))


@router.post(
    "/validate",
    response_model=ValidationResponse,
    responses={409: {"description": "A required reference record is missing"}},
)
async def validate_reference_data(auth: AuthContext = Depends(require_admin)) -> ValidationResponse:
    _ = auth
    try:
        validate_seed_data(get_engine())
    except ValidationError as exc:
        raise HTTPException(status_code=409, detail={"valid": False, "missing": exc.entity}) from exc
    return ValidationResponse(valid=True)


@router.post("/run", response_model=SeedRunResponse)
async def run_seed(auth: AuthContext = Depends(require_admin)) -> SeedRunResponse:
    try:
        report = seed_database(get_engine())
    except SeedError as exc:
        logger.exception(
            "Seed run requested over HTTP failed",
            extra={"event": "seed_api_failed", "stage": exc.stage, "path": "/api/seed/run"},
        )
        raise HTTPException(status_code=500, detail=f"Seeding failed at stage '{exc.stage}'") from exc
    except BootstrapError as exc:
        logger.exception("Seed run requested over HTTP failed", extra={"event": "seed_api_failed"})
        raise HTTPException(status_code=500, detail="Seeding failed") from exc

    logger.info(
        "Seed run requested over HTTP",
        extra={"event": "seed_api_run", "mode": report.mode, "actor": auth.username},
    )
    return SeedRunResponse(**report.public_dict())


@router.delete("", response_model=CleanupResponse)
async def clean_reference_data(auth: AuthContext = Depends(require_admin)) -> CleanupResponse:
    if settings.is_production:
        raise HTTPException(status_code=403, detail="Cleanup is disabled in production")

    failed = clean_seed_data(get_engine())
    logger.warning(
        "Seed data cleaned over HTTP",
        extra={"event": "seed_api_clean", "actor": auth.username},
    )
    cleared = [table.name for table in CLEANUP_ORDER if table.name not in failed]
    return CleanupResponse(cleared=cleared, failed=failed)

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import select

from ..db import get_db
from ..models import Recommendation, Tag
from ..reference_data import BandThresholds, classify_muac
from ..schemas import ClassificationResponse

router = APIRouter(prefix="/api", tags=["classify"])


@router.get("/classify", response_model=ClassificationResponse)
async def classify(muac_cm: float = Query(...)) -> ClassificationResponse:
    """Map an arm circumference in centimetres to its band, tag and recommendation."""

    try:
        code = classify_muac(muac_cm, BandThresholds.from_settings())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    with get_db() as session:
        tag = session.execute(
            select(Tag).where(Tag.muac_code == code, Tag.active.is_not(False)).limit(1)
        ).scalar_one_or_none()
        recommendation = session.execute(
            select(Recommendation)
            .where(Recommendation.muac_code == code, Recommendation.active.is_not(False))
            .limit(1)
        ).scalar_one_or_none()

    return ClassificationResponse(
        muac_cm=muac_cm,
        muac_code=code,
        tag=tag.name if tag else None,
        color=tag.color if tag else None,
        recommendation=recommendation.name if recommendation else None,
        recommendation_umbral=recommendation.recommendation_umbral if recommendation else None,
        priority=recommendation.priority if recommendation else None,
    )

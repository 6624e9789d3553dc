"""
Analytics API endpoints.
"""
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.database import get_db
from fitlog.core.exceptions import AggregationError
from fitlog.core.logging import get_logger
from fitlog.services.analytics import AnalyticsService
from fitlog.services.analytics.store import parse_user_id

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class BodyMeasurementRequest(BaseModel):
    """Request to add a body measurement."""
    weight: float = Field(..., gt=0)
    bodyFat: Optional[float] = Field(None, ge=0, le=100)
    chest: Optional[float] = Field(None, gt=0)
    waist: Optional[float] = Field(None, gt=0)
    hips: Optional[float] = Field(None, gt=0)
    arms: Optional[float] = Field(None, gt=0)
    thighs: Optional[float] = Field(None, gt=0)
    notes: Optional[str] = None


class FitnessScoreRequest(BaseModel):
    """Request to add a fitness score."""
    strength: int = Field(..., ge=0, le=100)
    cardio: int = Field(..., ge=0, le=100)
    flexibility: int = Field(..., ge=0, le=100)
    consistency: int = Field(..., ge=0, le=100)


class AchievementRequest(BaseModel):
    """Request to add an achievement."""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    icon: str = Field(..., min_length=1)


class DataResponse(BaseModel):
    """Envelope for analytics responses."""
    success: bool = True
    data: Any


def _validate_user(user_id: str) -> str:
    try:
        parse_user_id(user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return user_id


# ========================================
# API Endpoints
# ========================================

@router.get("/{user_id}/overview", response_model=DataResponse)
async def get_overview(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Get the user's analytics summary, creating it on first access.
    """
    _validate_user(user_id)
    try:
        row = await AnalyticsService(db).get_overview(user_id)
    except AggregationError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return DataResponse(data=row.to_dict())


@router.get("/{user_id}/daily", response_model=DataResponse)
async def get_daily_stats(
    user_id: str,
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Get daily stats in a date range (default: last 30 days), ascending.
    """
    _validate_user(user_id)
    stats = await AnalyticsService(db).get_daily_stats(user_id, startDate, endDate)
    return DataResponse(data=stats)


@router.get("/{user_id}/body-measurements", response_model=DataResponse)
async def get_body_measurements(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Get body measurements, newest first.
    """
    _validate_user(user_id)
    return DataResponse(data=await AnalyticsService(db).list_body_measurements(user_id))


@router.post("/{user_id}/body-measurements", response_model=DataResponse, status_code=201)
async def add_body_measurement(
    user_id: str,
    request: BodyMeasurementRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Add a body measurement dated now.
    """
    _validate_user(user_id)
    entry = await AnalyticsService(db).store.add_body_measurement(
        user_id, request.model_dump(exclude_none=True)
    )
    return DataResponse(data=entry)


@router.get("/{user_id}/fitness-scores", response_model=DataResponse)
async def get_fitness_scores(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Get fitness scores, newest first.
    """
    _validate_user(user_id)
    return DataResponse(data=await AnalyticsService(db).list_fitness_scores(user_id))


@router.post("/{user_id}/fitness-scores", response_model=DataResponse, status_code=201)
async def add_fitness_score(
    user_id: str,
    request: FitnessScoreRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Add a fitness score; overall is the rounded average of the four scores.
    """
    _validate_user(user_id)
    entry = await AnalyticsService(db).store.add_fitness_score(
        user_id,
        strength=request.strength,
        cardio=request.cardio,
        flexibility=request.flexibility,
        consistency=request.consistency,
    )
    return DataResponse(data=entry)


@router.get("/{user_id}/achievements", response_model=DataResponse)
async def get_achievements(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Get achievements, most recently earned first.
    """
    _validate_user(user_id)
    return DataResponse(data=await AnalyticsService(db).list_achievements(user_id))


@router.post("/{user_id}/achievements", response_model=DataResponse, status_code=201)
async def add_achievement(
    user_id: str,
    request: AchievementRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Add an achievement earned now.
    """
    _validate_user(user_id)
    entry = await AnalyticsService(db).store.add_achievement(
        user_id,
        name=request.name,
        description=request.description,
        icon=request.icon,
    )
    return DataResponse(data=entry)


@router.post("/{user_id}/rebuild", response_model=DataResponse)
async def rebuild_analytics(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Recompute the user's analytics from their full workout history.
    """
    _validate_user(user_id)
    logger.info("Rebuilding analytics", user_id=user_id)

    try:
        row = await AnalyticsService(db).rebuild(user_id)
    except AggregationError as e:
        logger.error("Analytics rebuild failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))

    return DataResponse(data=row.to_dict())

"""
Workout Log API endpoints.
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.config import settings
from fitlog.core.database import get_db
from fitlog.core.exceptions import AggregationError
from fitlog.core.logging import get_logger
from fitlog.services.analytics import AnalyticsService, WorkoutLogStore

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class CreateWorkoutRequest(BaseModel):
    """Request to log a workout."""
    userId: str = Field(..., description="Owner user ID")
    title: str = Field(..., min_length=1, max_length=200)
    duration: int = Field(0, ge=0, description="Duration in minutes")
    caloriesBurned: int = Field(0, ge=0)
    notes: Optional[str] = None
    createdAt: Optional[datetime] = Field(None, description="When the workout happened, defaults to now")

    @field_validator("createdAt")
    @classmethod
    def normalize_created_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Stored as naive UTC, like the column default
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class WorkoutResponse(BaseModel):
    """Workout log response."""
    id: str
    userId: str
    title: str
    duration: int
    caloriesBurned: int
    notes: Optional[str]
    createdAt: int


class CreateWorkoutResponse(WorkoutResponse):
    """Workout log response with analytics outcome."""
    analyticsUpdated: bool = False


# ========================================
# API Endpoints
# ========================================

@router.post("", response_model=CreateWorkoutResponse)
async def create_workout(
    request: CreateWorkoutRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Log a workout and fold it into the user's analytics.

    Analytics is best-effort: if the summary cannot be updated the
    workout is still recorded and analyticsUpdated is false.
    """
    workouts = WorkoutLogStore(db)

    try:
        log = await workouts.create(
            user_id=request.userId,
            title=request.title,
            duration=request.duration,
            calories_burned=request.caloriesBurned,
            notes=request.notes,
            created_at=request.createdAt,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info("Workout logged", workout_id=str(log.id), user_id=request.userId)
    response = log.to_dict()

    analytics_updated = False
    if settings.ANALYTICS_FOLD_ON_LOG:
        try:
            await AnalyticsService(db).record_workout_log(log)
            analytics_updated = True
        except AggregationError as e:
            logger.warning(
                "Analytics not updated for workout",
                workout_id=response["id"],
                user_id=request.userId,
                error=str(e)
            )

    return CreateWorkoutResponse(**response, analyticsUpdated=analytics_updated)


@router.get("/{user_id}", response_model=list[WorkoutResponse])
async def list_workouts(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a user's workout logs, oldest first.
    """
    try:
        logs = await WorkoutLogStore(db).list_for_user(user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return [WorkoutResponse(**log.to_dict()) for log in logs]

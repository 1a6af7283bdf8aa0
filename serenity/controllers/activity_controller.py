"""API controller for wellness activity logging."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger

from ..models.activity import Activity, ActivityRequest
from ..services.activity_service import ActivityService, get_activity_service
from ..utils.error_handler import InvalidUserIdError

router = APIRouter(prefix="/activity", tags=["Activity"])


@router.post("", response_model=Activity, status_code=status.HTTP_201_CREATED)
async def log_activity_endpoint(
    user_id: str,
    request: ActivityRequest,
    response: Response,
    service: ActivityService = Depends(get_activity_service),
) -> Activity:
    """Log an activity; a repeat within five seconds returns the original."""
    try:
        activity, created = service.log_activity(user_id, request)
    except InvalidUserIdError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error logging activity")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log activity",
        ) from exc

    if not created:
        response.status_code = status.HTTP_200_OK
        return activity

    service.notify_activity_logged(user_id)
    return activity


@router.get("/today", response_model=list[Activity])
async def today_activities_endpoint(
    user_id: str,
    service: ActivityService = Depends(get_activity_service),
) -> list[Activity]:
    activities = service.get_today_activities(user_id)
    logger.info("Found {} activities today for user {}", len(activities), user_id)
    return activities


@router.get("/history", response_model=list[Activity])
async def activity_history_endpoint(
    user_id: str,
    service: ActivityService = Depends(get_activity_service),
) -> list[Activity]:
    activities = service.get_history(user_id)
    logger.info("Found {} total activities for user {}", len(activities), user_id)
    return activities

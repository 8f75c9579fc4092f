"""Badge and points routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user, require_admin
from core.dependencies import GamificationManagerDep
from core.exceptions import BadgeAlreadyExistsError, BadgeNotFoundError, ValidationError
from schemas.badge import BadgeInfo, CreateBadgeRequest, PointsInfo
from schemas.user import User
from utils.gamification_manager import level_for_points

router = APIRouter(prefix="/api", tags=["Gamification"])


@router.get("/badges", response_model=List[BadgeInfo], summary="List badges")
def list_badges(
    gamification_manager: GamificationManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[BadgeInfo]:
    """List every badge, flagged as earned or locked for the current user."""
    return gamification_manager.list_badges(current_user.user_id)


@router.post(
    "/badges",
    response_model=BadgeInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create a badge",
)
def create_badge(
    req: CreateBadgeRequest,
    gamification_manager: GamificationManagerDep,
    current_user: User = Depends(require_admin),
) -> BadgeInfo:
    try:
        return gamification_manager.create_badge(
            name=req.name,
            description=req.description,
            icon_url=req.icon_url,
            points_threshold=req.points_threshold,
            requirements=req.requirements,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except BadgeAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete("/badges/{badge_id}", summary="Delete a badge")
def delete_badge(
    badge_id: str,
    gamification_manager: GamificationManagerDep,
    current_user: User = Depends(require_admin),
) -> dict:
    try:
        gamification_manager.delete_badge(badge_id)
    except BadgeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Badge deleted successfully"}


@router.get("/points", response_model=PointsInfo, summary="Own points and level")
def get_points(
    gamification_manager: GamificationManagerDep,
    current_user: User = Depends(get_current_user),
) -> PointsInfo:
    total = gamification_manager.get_points(current_user.user_id)
    level, next_level_points, _ = level_for_points(total)
    return PointsInfo(total_points=total, level=level, next_level_points=next_level_points)

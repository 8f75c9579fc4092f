"""Dashboard routes."""

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user
from core.dependencies import DashboardManagerDep
from schemas.dashboard import DashboardResponse
from schemas.user import User

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse, summary="Progress dashboard")
def get_dashboard(
    dashboard_manager: DashboardManagerDep,
    current_user: User = Depends(get_current_user),
) -> DashboardResponse:
    """Summarize the current user's points, completion and recent activity.

    Args:
        dashboard_manager: Injected DashboardManager instance.
        current_user: Current authenticated user.

    Returns:
        DashboardResponse for the current user.
    """
    return dashboard_manager.build_dashboard(current_user)

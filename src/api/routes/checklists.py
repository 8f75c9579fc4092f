"""Checklist routes.

This module handles HTTP endpoints for preparedness checklists and per-user
item completion.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user, require_staff
from core.dependencies import ChecklistManagerDep
from core.exceptions import ChecklistItemNotFoundError, ChecklistNotFoundError
from schemas.checklist import (
    ChecklistDetail,
    ChecklistSummary,
    CreateChecklistRequest,
    ToggleItemRequest,
    ToggleItemResponse,
)
from schemas.others import DisasterType
from schemas.user import User

router = APIRouter(prefix="/api/checklists", tags=["Checklist"])


@router.get("", response_model=List[ChecklistSummary], summary="List checklists")
def list_checklists(
    checklist_manager: ChecklistManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[ChecklistSummary]:
    return checklist_manager.list_checklists(current_user.user_id)


@router.get("/{disaster_type}", response_model=ChecklistDetail, summary="Checklist for a disaster type")
def get_checklist(
    disaster_type: DisasterType,
    checklist_manager: ChecklistManagerDep,
    current_user: User = Depends(get_current_user),
) -> ChecklistDetail:
    """Get the checklist of a disaster type with the user's item states.

    Raises:
        HTTPException: 404 if no published checklist exists for the type.
    """
    try:
        return checklist_manager.get_checklist_by_type(disaster_type, current_user.user_id)
    except ChecklistNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put(
    "/items/{item_id}/progress",
    response_model=ToggleItemResponse,
    summary="Set checklist item completion",
)
def set_item_progress(
    item_id: str,
    req: ToggleItemRequest,
    checklist_manager: ChecklistManagerDep,
    current_user: User = Depends(get_current_user),
) -> ToggleItemResponse:
    """Check or uncheck a checklist item for the current user.

    Raises:
        HTTPException: 404 if the item does not exist.
    """
    try:
        return checklist_manager.set_item_completion(
            current_user.user_id, item_id, req.completed
        )
    except ChecklistItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "",
    response_model=ChecklistDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create a checklist",
)
def create_checklist(
    req: CreateChecklistRequest,
    checklist_manager: ChecklistManagerDep,
    current_user: User = Depends(require_staff),
) -> ChecklistDetail:
    return checklist_manager.create_checklist(req, created_by=current_user.user_id)


@router.delete("/id/{checklist_id}", summary="Delete a checklist")
def delete_checklist(
    checklist_id: str,
    checklist_manager: ChecklistManagerDep,
    current_user: User = Depends(require_staff),
) -> dict:
    try:
        checklist_manager.delete_checklist(checklist_id)
    except ChecklistNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Checklist deleted successfully"}

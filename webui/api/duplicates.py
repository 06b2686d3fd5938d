"""Duplicate detection API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from organizer import MediaOrganizer
from webui.models.schemas import DuplicateGroupSchema, DuplicateScanResponse
from webui.services.organizer_service import get_organizer

router = APIRouter(prefix="/api/duplicates", tags=["duplicates"])


@router.get("", response_model=List[DuplicateGroupSchema])
def list_duplicates(threshold: Optional[int] = None, organizer: MediaOrganizer = Depends(get_organizer)):
    """Group catalogued items by filename similarity"""
    return [DuplicateGroupSchema(**group.to_dict()) for group in organizer.find_duplicates(threshold)]


@router.post("/scan", response_model=DuplicateScanResponse)
def scan_duplicates(threshold: Optional[int] = None, organizer: MediaOrganizer = Depends(get_organizer)):
    """Mark every non-original member of each duplicate group as duplicate"""
    groups = organizer.mark_duplicates(threshold)
    return DuplicateScanResponse(groups=groups, message=f"Found {groups} duplicate groups")

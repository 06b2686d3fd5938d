"""Media library API endpoints: items, series, movies, activity and stats"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from organizer import MediaOrganizer
from webui.models.schemas import (
    BulkDeleteRequest, MediaItemSchema, MovieSchema, OrganizationLogSchema,
    RefreshStatusResponse, StatsSchema, TVSeriesSchema
)
from webui.services.organizer_service import get_organizer

router = APIRouter(prefix="/api", tags=["library"])


@router.get("/media-items", response_model=List[MediaItemSchema])
async def list_media_items(organizer: MediaOrganizer = Depends(get_organizer)):
    return [MediaItemSchema(**item.to_dict()) for item in organizer.storage.all_items()]


@router.get("/media-items/pending", response_model=List[MediaItemSchema])
async def list_pending_items(organizer: MediaOrganizer = Depends(get_organizer)):
    """Pending items with their planned destinations"""
    return [MediaItemSchema(**item.to_dict()) for item in organizer.preview()]


@router.post("/media-items/refresh-status", response_model=RefreshStatusResponse)
def refresh_status(organizer: MediaOrganizer = Depends(get_organizer)):
    """Reconcile pending items with the filesystem and drop orphans"""
    updated, removed = organizer.refresh_status()
    return RefreshStatusResponse(updated=updated, removed=removed)


@router.post("/media-items/bulk-delete")
async def bulk_delete_items(request: BulkDeleteRequest, organizer: MediaOrganizer = Depends(get_organizer)):
    deleted = organizer.bulk_delete_items(request.ids)
    return {"success": True, "deleted": deleted}


@router.get("/media-items/{item_id}", response_model=MediaItemSchema)
async def get_media_item(item_id: str, organizer: MediaOrganizer = Depends(get_organizer)):
    item = organizer.storage.get_item(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Media item not found")
    return MediaItemSchema(**item.to_dict())


@router.delete("/media-items/{item_id}")
async def delete_media_item(item_id: str, organizer: MediaOrganizer = Depends(get_organizer)):
    if not organizer.delete_item(item_id):
        raise HTTPException(status_code=404, detail="Media item not found")
    return {"success": True}


@router.get("/tv-series", response_model=List[TVSeriesSchema])
async def list_tv_series(organizer: MediaOrganizer = Depends(get_organizer)):
    return [TVSeriesSchema(**series.to_dict()) for series in organizer.storage.all_tv_series()]


@router.delete("/tv-series/{series_id}")
async def delete_tv_series(series_id: str, organizer: MediaOrganizer = Depends(get_organizer)):
    if not organizer.delete_tv_series(series_id):
        raise HTTPException(status_code=404, detail="TV series not found")
    return {"success": True}


@router.get("/movies", response_model=List[MovieSchema])
async def list_movies(organizer: MediaOrganizer = Depends(get_organizer)):
    return [MovieSchema(**movie.to_dict()) for movie in organizer.storage.all_movies()]


@router.delete("/movies/{movie_id}")
async def delete_movie(movie_id: str, organizer: MediaOrganizer = Depends(get_organizer)):
    if not organizer.delete_movie(movie_id):
        raise HTTPException(status_code=404, detail="Movie not found")
    return {"success": True}


@router.get("/logs", response_model=List[OrganizationLogSchema])
async def list_logs(limit: Optional[int] = None, organizer: MediaOrganizer = Depends(get_organizer)):
    """Activity history, newest first"""
    return [OrganizationLogSchema(**log.to_dict()) for log in organizer.storage.all_logs(limit)]


@router.get("/stats", response_model=StatsSchema)
async def get_stats(organizer: MediaOrganizer = Depends(get_organizer)):
    return StatsSchema(**organizer.stats())

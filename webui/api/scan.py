"""Scan job API endpoints"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from model import JobKind
from organizer import MediaOrganizer
from webui.models.schemas import JobStartResponse, ScanJobSchema
from webui.services.organizer_service import get_organizer

router = APIRouter(prefix="/api/scan", tags=["scan"])
logger = logging.getLogger(__name__)


@router.post("", response_model=JobStartResponse)
async def start_scan(organizer: MediaOrganizer = Depends(get_organizer)):
    """Start a background scan of the configured source paths"""
    try:
        job, started = organizer.start_scan()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting scan: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to start scan: {str(e)}")

    return JobStartResponse(
        job_id=job.id,
        status=job.status.value,
        message="Scan started" if started else "Scan already in progress"
    )


@router.get("/active", response_model=ScanJobSchema)
async def get_active_scan(organizer: MediaOrganizer = Depends(get_organizer)):
    """Get the scan job currently pending or running"""
    job = organizer.registry.active(JobKind.SCAN)
    if not job:
        raise HTTPException(status_code=404, detail="No active scan")
    return ScanJobSchema(**job.to_dict())


@router.get("/{job_id}", response_model=ScanJobSchema)
async def get_scan_status(job_id: str, organizer: MediaOrganizer = Depends(get_organizer)):
    """Get status of a scan job"""
    job = organizer.registry.get(JobKind.SCAN, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Scan job not found")
    return ScanJobSchema(**job.to_dict())

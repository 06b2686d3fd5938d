"""Organization workflow API endpoints"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from model import JobKind
from organizer import MediaOrganizer
from webui.models.schemas import (
    JobStartResponse, OrganizeJobRequest, OrganizeJobSchema, OrganizeRequest, OrganizeResultSchema
)
from webui.services.organizer_service import get_organizer

router = APIRouter(prefix="/api/organize", tags=["organize"])
logger = logging.getLogger(__name__)


@router.post("", response_model=OrganizeResultSchema)
def organize_items(request: OrganizeRequest, organizer: MediaOrganizer = Depends(get_organizer)):
    """Organize items synchronously (or verify them with dry_run)"""
    try:
        result = organizer.organize(request.ids, dry_run=request.dry_run)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error organizing items: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to organize: {str(e)}")

    data = result.to_dict()
    return OrganizeResultSchema(
        success_count=result.success_count,
        failed_count=result.failed_count,
        **data
    )


@router.post("/jobs", response_model=JobStartResponse)
async def start_organize_job(request: OrganizeJobRequest, organizer: MediaOrganizer = Depends(get_organizer)):
    """Start a background organize job"""
    try:
        job, started = organizer.start_organize(request.ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting organize job: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to start organize job: {str(e)}")

    return JobStartResponse(
        job_id=job.id,
        status=job.status.value,
        message="Organization started" if started else "Organization already in progress"
    )


@router.get("/jobs/active", response_model=OrganizeJobSchema)
async def get_active_organize_job(organizer: MediaOrganizer = Depends(get_organizer)):
    """Get the organize job currently pending or running"""
    job = organizer.registry.active(JobKind.ORGANIZE)
    if not job:
        raise HTTPException(status_code=404, detail="No active organize job")
    return OrganizeJobSchema(**job.to_dict())


@router.get("/jobs/{job_id}", response_model=OrganizeJobSchema)
async def get_organize_job_status(job_id: str, organizer: MediaOrganizer = Depends(get_organizer)):
    """Get status of an organize job"""
    job = organizer.registry.get(JobKind.ORGANIZE, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return OrganizeJobSchema(**job.to_dict())

"""Configuration API endpoints"""

from fastapi import APIRouter, Depends, HTTPException, Request

from config import Config, find_config_file, save_config
from organizer import MediaOrganizer
from webui.models.schemas import ConfigSchema
from webui.services.organizer_service import get_organizer

router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("", response_model=ConfigSchema)
async def get_config(organizer: MediaOrganizer = Depends(get_organizer)):
    """Get current configuration"""
    return ConfigSchema(**organizer.config.to_dict())


@router.put("", response_model=ConfigSchema)
async def update_config(config_data: ConfigSchema, request: Request,
                        organizer: MediaOrganizer = Depends(get_organizer)):
    """Update configuration, persist it and apply it to the running organizer"""
    try:
        config = Config.from_dict(config_data.dict())
        save_config(config, str(find_config_file(getattr(request.app.state, 'config_path', None))))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Failed to save config: {str(e)}")

    organizer.apply_config(config)
    return ConfigSchema(**config.to_dict())


@router.get("/validate")
async def validate_config(organizer: MediaOrganizer = Depends(get_organizer)):
    """Validate current configuration"""
    errors = []
    for check in (organizer.config.validate_for_scan, organizer.config.validate_for_organize):
        try:
            check()
        except ValueError as e:
            if str(e) not in errors:
                errors.append(str(e))

    return {
        "valid": len(errors) == 0,
        "errors": errors
    }

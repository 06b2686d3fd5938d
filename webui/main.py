"""FastAPI application entry point"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from organizer import MediaOrganizer
from webui.api import config, duplicates, library, organize, scan


def create_app(organizer: Optional[MediaOrganizer] = None, config_path: Optional[str] = None) -> FastAPI:
    """
    Build the API application

    Args:
        organizer: Organizer to serve; created from config.yaml on first request when omitted
        config_path: config.yaml location used to build the organizer and to save settings
    """
    app = FastAPI(
        title="Media Organizer",
        description="Scan, preview and organize a movie/TV library into Jellyfin layout",
        version="1.0.0"
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.organizer = organizer
    app.state.config_path = config_path

    app.include_router(config.router)
    app.include_router(scan.router)
    app.include_router(organize.router)
    app.include_router(duplicates.router)
    app.include_router(library.router)

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "healthy"}

    # Mount static files if they exist
    static_dir = Path(__file__).parent / "static"
    if static_dir.exists():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

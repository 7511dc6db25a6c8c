"""
FastAPI service for image-resizer-core

Exposes format-group resizing as HTTP API for language-agnostic access.
"""

import base64
import logging
import os
import shutil
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from image_resizer import (
    CleanupFailed,
    ImageResizerError,
    PillowBackend,
    ResizerSettings,
    SourceImageUnreadable,
    UnknownGroup,
    __version__,
    create_resizer,
    load_settings,
)

CONFIG_ENV = "IMAGE_RESIZER_CONFIG"

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
)
logger = logging.getLogger("image_resizer.service")

# Used when no settings file is configured
DEFAULT_SETTINGS = {
    "default_group": "default",
    "formats_groups": {
        "default": [
            {"name": "big", "width": 800, "resizeMode": "proportional"},
            {"name": "medium", "width": 300, "resizeMode": "proportional"},
            {"name": "small", "width": 100, "height": 100, "resizeMode": "crop"},
        ],
    },
}

# Initialize FastAPI app
app = FastAPI(
    title="Image Resizer API",
    description="Image resizing service - converts an upload into named, resized variants",
    version=__version__,
)

# CORS - allow backend to call this service
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure based on deployment
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class VariantSchema(BaseModel):
    """One generated variant"""
    width: int
    height: int
    format: str
    base64: str


class ResizeResponse(BaseModel):
    """Response of POST /v1/resize"""
    source_filename: str
    group: str
    variants: Dict[str, VariantSchema]


class FormatSchema(BaseModel):
    """Format definition as listed by GET /v1/groups"""
    name: str
    width: Optional[int] = None
    height: Optional[int] = None
    resizeMode: str
    outputFormat: str
    quality: int


class ErrorResponse(BaseModel):
    """Error response"""
    error: str
    detail: Optional[str] = None


@lru_cache(maxsize=1)
def get_settings() -> ResizerSettings:
    """Settings from $IMAGE_RESIZER_CONFIG, or the built-in default group"""
    config_path = os.getenv(CONFIG_ENV)
    if config_path:
        logger.info("Loading resizer settings from %s", config_path)
        return load_settings(config_path)
    return ResizerSettings.from_dict(DEFAULT_SETTINGS)


# API Endpoints
@app.get("/")
def root():
    """API root - health check"""
    return {
        "service": "Image Resizer API",
        "version": __version__,
        "status": "healthy"
    }


@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy"}


@app.get("/v1/groups", response_model=Dict[str, List[FormatSchema]])
def list_groups(settings: ResizerSettings = Depends(get_settings)):
    """List the registered format groups and their formats"""
    return {
        name: [spec.to_map() for spec in specs]
        for name, specs in settings.formats_groups.items()
    }


@app.post(
    "/v1/resize",
    response_model=ResizeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def resize_endpoint(
    file: UploadFile = File(..., description="Image file to resize"),
    group: Optional[str] = Form(None, description="Formats group to apply. Defaults to the configured default group."),
    settings: ResizerSettings = Depends(get_settings),
):
    """
    Resize an uploaded image with every format of a group.

    The upload is stored in the temp directory, resized, and every generated
    file (and the upload itself) is deleted before the response is sent.
    Variants come back as Base64-encoded image bytes.

    Example:
        curl -X POST http://localhost:8766/v1/resize \\
          -F "file=@photo.jpg" \\
          -F "group=default"
    """
    group = group or settings.default_group or "default"

    resizer = create_resizer(settings)
    resizer.detach_all_formats()
    try:
        resizer.use_formats_group(group)
    except UnknownGroup as e:
        raise HTTPException(status_code=404, detail=str(e))

    suffix = Path(file.filename or "").suffix
    upload_path = resizer.temp_directory / f"upload_{uuid.uuid4().hex}{suffix}"

    try:
        resizer.temp_directory.mkdir(parents=True, exist_ok=True)
        with open(upload_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)

        outputs = resizer.resize(upload_path)

        backend = PillowBackend()
        variants = {}
        for name, output_path in outputs.items():
            width, height = backend.read_dimensions(output_path)
            variants[name] = VariantSchema(
                width=width,
                height=height,
                format=output_path.suffix.lstrip("."),
                base64=base64.b64encode(output_path.read_bytes()).decode(),
            )
    except SourceImageUnreadable as e:
        raise HTTPException(status_code=400, detail=f"Invalid image file: {e}")
    except (ImageResizerError, OSError) as e:
        logger.exception("Resizing upload '%s' failed", file.filename)
        raise HTTPException(status_code=500, detail=f"Resizing failed: {e}")
    finally:
        upload_path.unlink(missing_ok=True)
        try:
            resizer.delete_generated_files()
        except CleanupFailed as e:
            logger.warning("Cleanup after upload '%s' incomplete: %s", file.filename, e)

    return ResizeResponse(
        source_filename=file.filename or "unknown",
        group=group,
        variants=variants,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8766)

"""
FastAPI backend for turnwind.

This provides REST API endpoints to replay recorded circling tracks through
the wind estimator.
"""

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Dict, List, Optional, Any
import logging
import io

from turnwind.config.settings import (
    APP_NAME, APP_VERSION, APP_DESCRIPTION, LOGGING_CONFIG, EstimatorConfig, ReplayConfig
)
from turnwind.core.processor import ProcessorParams
from turnwind.core.validation import ValidationError, validate_file_upload
from turnwind.services.track_analysis_service import analyze_gpx_file

logging.basicConfig(**LOGGING_CONFIG)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="turnwind API",
    description=APP_DESCRIPTION,
    version=APP_VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# Pydantic models for API responses
class SampleResponse(BaseModel):
    ground_speed_kt: float
    track_deg: float
    altitude: Optional[float]


class WindEstimateResponse(BaseModel):
    wind_speed_kt: float
    wind_direction_from_deg: float
    altitude_ft: Optional[float]
    sample_count: int
    samples: Optional[List[SampleResponse]] = None


class TrackEstimateResponse(BaseModel):
    filename: str
    point_count: int
    rejected_count: int
    cycle_count: int
    residual_turn_deg: float
    mean_wind_speed_kt: Optional[float]
    mean_wind_direction_from_deg: Optional[float]
    mean_altitude_ft: Optional[float]
    estimates: List[WindEstimateResponse]


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": f"{APP_NAME} API",
        "version": APP_VERSION,
        "endpoints": {
            "POST /api/estimate-wind": "Estimate wind from a GPX track of circling flight",
            "GET /api/config": "Default estimator parameters",
            "GET /api/health": "Health check endpoint"
        }
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "turnwind-api"}


@app.get("/api/config")
async def get_config() -> Dict[str, Any]:
    """Get default configuration values."""
    return {
        "defaults": EstimatorConfig.as_dict(),
        "replay": ReplayConfig.as_dict(),
    }


@app.post("/api/estimate-wind", response_model=TrackEstimateResponse)
async def estimate_wind(
    file: UploadFile = File(...),
    turn_threshold: float = EstimatorConfig.TURN_THRESHOLD,
    max_horizontal_accuracy: float = EstimatorConfig.MAX_HORIZONTAL_ACCURACY,
    default_accuracy: float = ReplayConfig.DEFAULT_ACCURACY,
    include_samples: bool = False
):
    """
    Estimate wind for every completed turn in a GPX track.

    Args:
        file: GPX file to analyze
        turn_threshold: Accumulated turn in degrees that closes a cycle
        max_horizontal_accuracy: Fixes less accurate than this (meters) are rejected
        default_accuracy: Accuracy assumed for points without HDOP
        include_samples: Return the smoothed samples of each cycle

    Returns:
        All wind estimates with a summary across cycles
    """
    content = await file.read()

    if len(content) > ReplayConfig.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {ReplayConfig.MAX_UPLOAD_SIZE / 1024 / 1024:.0f}MB, "
                   f"received {len(content) / 1024 / 1024:.1f}MB"
        )

    if len(content) < ReplayConfig.MIN_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="File appears to be empty or corrupted")

    params = ProcessorParams(**{
        **EstimatorConfig.as_dict(),
        'turn_threshold': turn_threshold,
        'max_horizontal_accuracy': max_horizontal_accuracy,
    })

    try:
        file_obj = io.BytesIO(content)
        file_obj.name = file.filename or "upload.gpx"
        validate_file_upload(file_obj, ReplayConfig.MAX_UPLOAD_SIZE)

        logger.info(f"Processing file: {file.filename}")
        result = analyze_gpx_file(
            file_obj,
            filename=file.filename or "upload.gpx",
            params=params,
            default_accuracy=default_accuracy,
        )
    except ValidationError as e:
        logger.warning(f"Rejected track {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error estimating wind: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error estimating wind: {str(e)}")

    summary = result.to_dict()
    summary['estimates'] = [
        WindEstimateResponse(**estimate.to_dict(include_samples=include_samples))
        for estimate in result.estimates
    ]
    return TrackEstimateResponse(**summary)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

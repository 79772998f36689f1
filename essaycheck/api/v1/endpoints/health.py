from fastapi import APIRouter
from datetime import datetime
import os
from essaycheck.core import config
from essaycheck.models.schemas import HealthResponse

router = APIRouter()

@router.get("/", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "environment": os.environ.get("ENVIRONMENT", "development"),
        "analysis_service": config.ANALYSIS_SERVICE_URL
    }

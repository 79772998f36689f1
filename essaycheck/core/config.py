# essaycheck/core/config.py
import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# CORS Configuration
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
]


def _parse_origins(raw: str):
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


CORS_ORIGINS = _parse_origins(os.getenv("CORS_ORIGINS", "")) or DEFAULT_CORS_ORIGINS

# Remote analysis service
ANALYSIS_SERVICE_URL = os.getenv("ANALYSIS_SERVICE_URL", "http://localhost:5000/analyze")


def _parse_timeout(raw):
    """Parse the optional request timeout; unset or empty means wait indefinitely"""
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid ANALYSIS_TIMEOUT_SECONDS value: {raw!r}")
        return None
    if value <= 0:
        logger.warning(f"Ignoring non-positive ANALYSIS_TIMEOUT_SECONDS value: {raw!r}")
        return None
    return value


ANALYSIS_TIMEOUT_SECONDS = _parse_timeout(os.getenv("ANALYSIS_TIMEOUT_SECONDS"))

if ANALYSIS_TIMEOUT_SECONDS is None:
    logger.info(f"Analysis service: {ANALYSIS_SERVICE_URL} (no request timeout)")
else:
    logger.info(f"Analysis service: {ANALYSIS_SERVICE_URL} (timeout {ANALYSIS_TIMEOUT_SECONDS}s)")

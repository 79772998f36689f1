import asyncio
import logging
import aiohttp
from typing import Dict, Any, Optional

from essaycheck.core import config
from essaycheck.core.exceptions import TransportError, ReportParseError

# Setup logging
logger = logging.getLogger(__name__)


class AnalysisClient:
    """HTTP client for the remote essay analysis service"""

    def __init__(self, endpoint_url: Optional[str] = None, timeout_seconds: Optional[float] = None):
        self.endpoint_url = endpoint_url or config.ANALYSIS_SERVICE_URL
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else config.ANALYSIS_TIMEOUT_SECONDS

    async def analyze(self, prompt: str, essay: str) -> Dict[str, Any]:
        """
        Send one essay to the analysis service.

        Args:
            prompt: The essay prompt
            essay: The essay text

        Returns:
            The decoded response body

        Raises:
            TransportError: connection failure, timeout or non-200 status
            ReportParseError: the response body is not a JSON object
        """
        payload = {"prompt": prompt, "essay": essay}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        logger.info(f"Requesting analysis for essay of length {len(essay)} from {self.endpoint_url}")

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.endpoint_url, json=payload) as response:
                    if response.status != 200:
                        error_content = await response.text()
                        logger.error(f"Analysis service error: {response.status}, {error_content[:200]}...")
                        raise TransportError(
                            f"Analysis service returned status {response.status}",
                            status_code=response.status,
                        )

                    try:
                        result = await response.json(content_type=None)
                    except ValueError as e:
                        raise ReportParseError(f"Response body is not valid JSON: {e}") from e

        except aiohttp.ClientError as e:
            raise TransportError(f"Could not reach analysis service: {str(e)}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"Analysis service timed out after {self.timeout_seconds}s") from e

        if not isinstance(result, dict):
            raise ReportParseError(f"Expected JSON object from analysis service, got {type(result).__name__}")

        return result

from pydantic import BaseModel
from typing import List


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    analysis_service: str


class PromptListResponse(BaseModel):
    prompts: List[str]
    count: int

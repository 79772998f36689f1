from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from essaycheck.core.config import CORS_ORIGINS
from essaycheck.api.v1.router import api_router
import logging

logger = logging.getLogger(__name__)

app = FastAPI(title="Essay Feedback API")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix="/api/v1")

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8080)

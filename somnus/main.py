import logging

from fastapi import FastAPI

from somnus.core.config import settings
from somnus.api.v1.health import router as health_router
from somnus.api.v1.analysis import router as analysis_router

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
)

app = FastAPI(title="Somnus SQI", version="1.0.0")

app.include_router(health_router, prefix="/v1")
app.include_router(analysis_router, prefix="/v1")

# main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.routes.quiz import router as quiz_router


def configure_logging(level: Optional[str] = None) -> None:
    """Apply LOG_LEVEL to the root logger, replacing any earlier setup"""
    level = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), force=True)


configure_logging()

app = FastAPI(title=settings.PROJECT_NAME)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,  # Frontend URL
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods (GET, POST, PUT, DELETE, etc.)
    allow_headers=["*"],  # Allows all headers
)


@app.get("/")
def read_root():
    return {"message": f"{settings.PROJECT_NAME} is running"}


app.include_router(quiz_router)

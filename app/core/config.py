from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    PROJECT_NAME: str = "Quiz Bank API"
    LOG_LEVEL: str = "INFO"

    # Quiz document storage
    QUIZ_DATA_PATH: str = "data/quiz-data.json"
    DEFAULT_QUESTION_COUNT: int = 10

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Quiz API client
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT: int = 30

    # Launcher
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

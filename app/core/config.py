from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./nutrition.db"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    # seconds uvicorn waits for in-flight requests on shutdown
    SHUTDOWN_GRACE_SECONDS: int = 5
    CORS_ORIGINS: List[str] = ["*"]

    # Oura v2 API (personal access token)
    OURA_API_BASE: str = "https://api.ouraring.com"
    OURA_TOKEN: Optional[str] = None
    OURA_TIMEOUT_SECONDS: float = 15.0

    # Local wall-clock times for the scheduled sync, "HH:MM"
    SYNC_ENABLED: bool = True
    SYNC_TIMES: List[str] = ["10:00", "22:00", "23:55"]
    SYNC_TIMEZONE: Optional[str] = None


settings = Settings()

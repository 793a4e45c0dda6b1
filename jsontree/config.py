# jsontree/config.py
from pathlib import Path
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Document tree sandbox
    DATA_ROOT: Path = Path("./data")
    DEFAULT_DOCUMENT: str = "data.json"   # target of the legacy /get-json routes
    JSON_INDENT: int = 2

    # Per-document write lock; None waits forever
    LOCK_TIMEOUT_SEC: float | None = 30.0

    # HTTP transport
    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = 3000

    # Security: Bearer token gates structural operations
    HTTP_BEARER_TOKEN: str = "change-me"         # set in .env for prod
    HTTP_ALLOWED_ORIGINS: str = "http://localhost, http://127.0.0.1"
    HTTP_ALLOW_NO_ORIGIN: bool = True            # allow non-browser clients

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

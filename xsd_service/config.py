import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SCHEMA_HEADER: str = os.getenv("SCHEMA_HEADER", "x-xsd-schema")
    FETCH_TIMEOUT_SECONDS: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "10"))
    MAX_CONTENT_BYTES: int = int(os.getenv("MAX_CONTENT_BYTES", str(10 * 1024 * 1024)))
    MAX_SCHEMA_DOCUMENTS: int = int(os.getenv("MAX_SCHEMA_DOCUMENTS", "200"))
    ALLOW_FILE_URLS: bool = _env_bool("ALLOW_FILE_URLS")


settings = Settings()

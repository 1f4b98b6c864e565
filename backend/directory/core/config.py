import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"  # noqa: S104
    PORT: int = 5000
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    COSMOS_DB_ENDPOINT: str = ""
    COSMOS_DB_KEY: str = ""
    COSMOS_DB_DATABASE: str = "employee-directory"
    COSMOS_DB_EMPLOYEES_CONTAINER: str = "employees"
    COSMOS_DB_AUTO_PROVISION: bool = True

    API_BASE_URL: str = "http://localhost:5000/api/employees"
    API_TIMEOUT_SECONDS: float = 15.0
    UNDO_SECONDS: int = 5
    TOAST_SECONDS: float = 3.0

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()

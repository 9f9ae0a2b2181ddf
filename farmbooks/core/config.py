from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    # --- Database ---
    DATABASE_URL: str = "sqlite:///data/farmbooks.db"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "data/logs"
    LOG_FILE_NAME: str = "farmbooks.log"
    LOG_BACKUP_DAYS: int = 30
    # PyPDF2 warns on every slightly malformed bill PDF
    PDF_LOG_LEVEL: str = "ERROR"

    # --- Bill uploads ---
    ALLOWED_UPLOAD_MIME_TYPES: list[str] = ["application/pdf"]
    BILLS_DIR: str = "bills"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()

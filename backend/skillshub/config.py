from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./skillshub.db"
    create_tables_on_startup: bool = True
    seed_reference_data: bool = True

    # Auth
    session_cookie_name: str = "session"
    session_ttl_days: int = 7
    session_cookie_secure: bool = False  # Set to True in production with HTTPS

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024  # 5MB
    allowed_upload_types: str = (
        "application/pdf,"
        "application/msword,"
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document,"
        "image/jpeg,"
        "image/png,"
        "text/plain"
    )

    # Client behaviour
    api_base_url: str = "http://localhost:8000"
    success_feedback_seconds: float = 2.0  # Shared by every submit flow
    reference_cache_ttl_seconds: float = 300.0

    # App
    debug: bool = False
    allowed_origins: str = ""

    def upload_content_types(self) -> list[str]:
        """Allowed upload MIME types as a list."""
        return [t.strip() for t in self.allowed_upload_types.split(",") if t.strip()]


settings = Settings()

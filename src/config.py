"""Configuration settings for the application."""
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

# Ensure .env values are loaded into os.environ before Settings is built.
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str = Field(default="sqlite:///./handcrafted_haven.db", alias="DATABASE_URL")
    # Object storage: one sub-directory per bucket, served under /storage
    media_dir: str = Field(default="media", alias="MEDIA_DIR")
    public_base_url: str = Field(default="", alias="PUBLIC_BASE_URL")
    storage_route: str = "/storage"
    # Upload limits (bytes)
    max_product_image_bytes: int = Field(default=5 * 1024 * 1024, alias="MAX_PRODUCT_IMAGE_BYTES")
    max_profile_image_bytes: int = Field(default=2 * 1024 * 1024, alias="MAX_PROFILE_IMAGE_BYTES")
    max_upload_bytes: int = Field(default=6 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    # Auth sessions
    session_ttl_hours: int = Field(default=24 * 7, alias="SESSION_TTL_HOURS")
    admin_token: str = Field(default="", alias="ADMIN_TOKEN")
    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="", alias="LOG_DIR")
    project_name: str = "Handcrafted Haven"
    api_version: str = "v1"

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True


settings = Settings()

# vidhub/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "VidHub API"
    # Unset ENV means production: error details are only exposed when ENV=dev
    env: str = os.getenv("ENV", "production")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend (comma-separated in CORS_ORIGINS)
    CORS_ORIGINS: list[str] = _split_origins(
        os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
    )

    # Cloudinary settings (avatar / cover image hosting)
    cloudinary_cloud_name: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = os.getenv("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.getenv("CLOUDINARY_API_SECRET")
    cloudinary_api_base: str = os.getenv("CLOUDINARY_API_URL", "https://api.cloudinary.com/v1_1")
    upload_timeout_seconds: float = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "60"))

    # Multipart uploads are written here before being pushed to Cloudinary
    upload_temp_dir: str = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")
    max_upload_size_mb: float = float(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))

    @property
    def is_dev(self) -> bool:
        return self.env.lower() in ("dev", "development", "local")


settings = Settings()  # Instantiate configuration

# app/config.py
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Environment-driven settings. Production keeps its data under the system temp dir.

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    data_dir: Path
    uploads_dir: Path
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    category_suffix: str = "Cosmetic.json"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    public_image_urls: bool = False
    allowed_categories: List[str] = field(default_factory=list)
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        environment = (os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").lower()
        if environment == "production":
            base = Path(tempfile.gettempdir()) / "catalog"
        else:
            base = Path.cwd()

        return cls(
            data_dir=Path(os.getenv("DATA_DIR") or base / "mock"),
            uploads_dir=Path(os.getenv("UPLOADS_DIR") or base / "uploads"),
            environment=environment,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            category_suffix=os.getenv("CATEGORY_FILE_SUFFIX", "Cosmetic.json"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")) or ["*"],
            public_image_urls=_env_flag("PUBLIC_IMAGE_URLS"),
            allowed_categories=[c.lower() for c in _split_csv(os.getenv("ALLOWED_CATEGORIES", ""))],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

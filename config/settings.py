import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, resolved once at startup.

    gemini_api_key decides the identification mode for the whole process:
    when it is missing the service runs in mock mode.
    """
    gemini_api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL_NAME
    database_url: str = "sqlite:///medetech.db"
    history_capacity: int = 50
    mock_image_delay: float = 2.0
    mock_text_delay: float = 1.5
    connectivity_host: str = "8.8.8.8"
    connectivity_port: int = 53
    connectivity_timeout: float = 3.0
    secure_store_key: Optional[str] = None
    secure_key_path: Path = Path(".medetech_secure.key")
    dev_mode: bool = True
    review_email: Optional[str] = None
    mail_email: str = ""
    mail_password: str = ""
    log_level: str = "INFO"

    @property
    def mock_mode(self) -> bool:
        return not self.gemini_api_key

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None
        if not api_key:
            logger.warning("GEMINI_API_KEY not set. Identification runs in MOCK mode.")

        return cls(
            gemini_api_key=api_key,
            model_name=os.getenv("GEMINI_MODEL", DEFAULT_MODEL_NAME),
            database_url=os.getenv("DATABASE_URL", "sqlite:///medetech.db"),
            history_capacity=int(os.getenv("HISTORY_CAPACITY", "50")),
            mock_image_delay=float(os.getenv("MOCK_IMAGE_DELAY_SECONDS", "2.0")),
            mock_text_delay=float(os.getenv("MOCK_TEXT_DELAY_SECONDS", "1.5")),
            connectivity_host=os.getenv("CONNECTIVITY_HOST", "8.8.8.8"),
            connectivity_port=int(os.getenv("CONNECTIVITY_PORT", "53")),
            connectivity_timeout=float(os.getenv("CONNECTIVITY_TIMEOUT", "3.0")),
            secure_store_key=os.getenv("SECURE_STORE_KEY") or None,
            secure_key_path=Path(os.getenv("SECURE_KEY_PATH", ".medetech_secure.key")),
            # Development mode flag - set to False when email is configured
            dev_mode=_env_flag("DEV_MODE", "true"),
            review_email=os.getenv("REVIEW_EMAIL") or None,
            mail_email=os.getenv("MAIL_EMAIL", ""),
            mail_password=os.getenv("MAIL_PASSWORD", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

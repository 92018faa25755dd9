"""
Runtime configuration for the Alphajot card service.
Values come from the environment (and a local .env file when present).
"""
from dotenv import load_dotenv

from dataclasses import dataclass
from typing import Optional
import os

DEFAULT_PLACEHOLDER_IMAGE = "https://alphajot.com/images/example.png"
DEFAULT_IMAGEKIT_UPLOAD_URL = "https://upload.imagekit.io/api/v1/files/upload"


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or "").strip() or default


def _env_int(name: str, default: int, lo: Optional[int] = None, hi: Optional[int] = None) -> int:
    try:
        value = int(os.getenv(name, str(default)))
    except Exception:
        value = default
    if lo is not None:
        value = max(lo, value)
    if hi is not None:
        value = min(value, hi)
    return value


@dataclass(frozen=True)
class CardSettings:
    openai_api_key: str = ""
    completion_model: str = "gpt-4.1-mini"
    image_model: str = "dall-e-2"
    imagekit_private_key: str = ""
    imagekit_public_key: str = ""
    imagekit_upload_url: str = DEFAULT_IMAGEKIT_UPLOAD_URL
    imagekit_folder: str = "/"
    email_host: str = ""
    email_port: int = 465
    email_user: str = ""
    email_password: str = ""
    mail_from: str = "Alphajot <hello@alphajot.com>"
    smtp_timeout: int = 30
    placeholder_image_url: str = DEFAULT_PLACEHOLDER_IMAGE
    port: int = 3000
    mail_workers: int = 2
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "CardSettings":
        """Build settings from environment variables, loading .env first."""
        if dotenv:
            load_dotenv()
        return cls(
            openai_api_key=_env_str("OPENAI_API_KEY"),
            completion_model=_env_str("OPENAI_MODEL", cls.completion_model),
            image_model=_env_str("OPENAI_IMAGE_MODEL", cls.image_model),
            imagekit_private_key=_env_str("IMAGEKIT_PRIVATE"),
            imagekit_public_key=_env_str("IMAGEKIT_PUBLIC"),
            imagekit_upload_url=_env_str("IMAGEKIT_UPLOAD_URL", cls.imagekit_upload_url),
            imagekit_folder=_env_str("IMAGEKIT_FOLDER", cls.imagekit_folder),
            email_host=_env_str("EMAIL_HOST"),
            email_port=_env_int("EMAIL_PORT", cls.email_port, 1, 65535),
            email_user=_env_str("EMAIL_USER"),
            email_password=os.getenv("EMAIL_PASSWORD", ""),
            mail_from=_env_str("EMAIL_FROM", cls.mail_from),
            smtp_timeout=_env_int("SMTP_TIMEOUT", cls.smtp_timeout, 1, 300),
            placeholder_image_url=_env_str("PLACEHOLDER_IMAGE_URL", cls.placeholder_image_url),
            port=_env_int("PORT", cls.port, 1, 65535),
            mail_workers=_env_int("MAIL_WORKERS", cls.mail_workers, 1, 8),
            log_level=_env_str("LOG_LEVEL", cls.log_level).upper(),
        )

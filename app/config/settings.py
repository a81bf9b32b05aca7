# app/config/settings.py

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_PATH = PROJECT_ROOT / ".env"

class Settings(BaseSettings):
    # API keys
    gemini_api_key: str

    # Model configs
    gemini_model: str = "models/gemini-2.0-flash"

    # Transient storage for uploads (relative paths resolve against the cwd)
    upload_dir: Path = Path("uploads")

    # Server
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)
    log_level: str = "INFO"

    # Return the raw provider message in 500 bodies
    expose_error_details: bool = True

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

@lru_cache
def get_settings() -> Settings:
    """
    Build the process-wide settings once; later calls return the same object.
    """
    return Settings()

IMAGE_MIME_TYPE = "image/png"

DEFAULT_IMAGE_PROMPT = "Describe the image"
DOCUMENT_PROMPT = "Analyze this document"
AUDIO_PROMPT = "Transcribe or analyze the following audio"

def choose_prompt(user_prompt: str | None, default: str = DEFAULT_IMAGE_PROMPT) -> str:
    """
    Return the user's prompt unchanged if it contains non-whitespace characters;
    otherwise fall back to `default`.
    """
    if user_prompt and user_prompt.strip():
        return user_prompt
    return default

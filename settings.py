# settings.py
from pydantic import BaseModel, Field
from dotenv import load_dotenv
import os

# Load variables from .env at import time
load_dotenv()


def _env_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in {"1", "true", "yes"}


class Settings(BaseModel):
    # Provider (Replicate-style predictions API)
    replicate_api_token: str = Field(default=os.getenv("REPLICATE_API_TOKEN", ""))
    replicate_api_base: str = Field(default=os.getenv("REPLICATE_API_BASE", "https://api.replicate.com/v1"))
    image_model: str = Field(default=os.getenv("REPLICATE_IMAGE_MODEL", "black-forest-labs/flux-kontext-pro"))
    video_model: str = Field(default=os.getenv("REPLICATE_VIDEO_MODEL", "wan-video/wan-2.2-i2v-fast"))
    video_dance_model: str = Field(default=os.getenv("REPLICATE_VIDEO_DANCE_MODEL", "kwaivgi/kling-v2.1"))

    # Input keys differ between models
    img_input_key: str = Field(default=os.getenv("IMG_INPUT_KEY", "image"))
    img_prompt_key: str = Field(default=os.getenv("IMG_PROMPT_KEY", "prompt"))
    img_neg_prompt_key: str = Field(default=os.getenv("IMG_NEG_PROMPT_KEY", "negative_prompt"))
    video_input_key: str = Field(default=os.getenv("VIDEO_INPUT_KEY", "image"))
    video_prompt_key: str = Field(default=os.getenv("VIDEO_PROMPT_KEY", "prompt"))

    # Image quality knobs
    image_steps: int = Field(default=int(os.getenv("IMAGE_STEPS", "24")))
    image_guidance: float = Field(default=float(os.getenv("IMAGE_GUIDANCE", "4.5")))
    image_aspect_ratio: str = Field(default=os.getenv("IMAGE_ASPECT_RATIO", "match_input_image"))

    # Video knobs, omitted from the payload when empty/0
    video_fps: int = Field(default=int(os.getenv("VIDEO_FPS", "0")))
    video_resolution: str = Field(default=os.getenv("VIDEO_RESOLUTION", ""))

    # Bounds (0 disables)
    provider_timeout_sec: float = Field(default=float(os.getenv("PROVIDER_TIMEOUT_SEC", "60")))
    job_ttl_sec: int = Field(default=int(os.getenv("JOB_TTL_SEC", "86400")))
    job_max_entries: int = Field(default=int(os.getenv("JOB_MAX_ENTRIES", "10000")))
    max_upload_bytes: int = Field(default=int(os.getenv("MAX_UPLOAD_BYTES", str(12 * 1024 * 1024))))

    # Service
    cors_origins: str = Field(default=os.getenv("CORS_ORIGINS", "*"))
    debug: bool = Field(default=_env_bool("DEBUG"))
    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))
    port: int = Field(default=int(os.getenv("PORT", "8080")))

settings = Settings()

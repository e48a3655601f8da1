# submitter.py
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from provider_client import ProviderClient, ProviderError
from settings import Settings
from styles import ImageStyle, JobKind, VideoStyle, resolve
from tracker import JobTracker

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/jpeg"


class SubmissionError(Exception):
    pass


@dataclass(frozen=True)
class HandleSubmission:
    """Image transform: the client gets our handle, the provider id stays server-side."""
    handle: str
    provider_id: str

    @property
    def id(self) -> str:
        return self.handle


@dataclass(frozen=True)
class ProviderSubmission:
    """Video animation: the provider's id goes straight back to the client."""
    provider_id: str

    @property
    def id(self) -> str:
        return self.provider_id


SubmissionResult = Union[HandleSubmission, ProviderSubmission]


def to_data_url(image_bytes: bytes, content_type: Optional[str] = None) -> str:
    media_type = content_type if content_type and content_type.startswith("image/") else DEFAULT_MEDIA_TYPE
    b64 = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{media_type};base64,{b64}"


def build_image_prompt(style: ImageStyle) -> str:
    return (
        "masterpiece, best quality, highly detailed. "
        "Keep the exact same composition, pose and framing as the input image; "
        "do not crop, zoom or add new objects or text. "
        f"STYLE: {style.positive} "
        f"STRICT NEGATIVE: {style.negative}"
    ).strip()


def build_video_prompt(style: VideoStyle) -> str:
    return (
        f"Animate the subject of this image: {style.motion}. "
        "Preserve the subject's identity exactly: same face, proportions, colors and outfit. "
        "No distortion, no morphing, no melting, no extra limbs, no new characters."
    )


class JobSubmitter:
    def __init__(self, provider: ProviderClient, tracker: JobTracker, settings: Settings):
        self.provider = provider
        self.tracker = tracker
        self.settings = settings

    def image_request(self, image_bytes: bytes, content_type: Optional[str], style_id: str) -> Tuple[str, Dict[str, Any]]:
        s = self.settings
        style = resolve(style_id, JobKind.IMAGE)
        payload: Dict[str, Any] = {
            s.img_input_key: to_data_url(image_bytes, content_type),
            s.img_prompt_key: build_image_prompt(style),
            "steps": s.image_steps,
            "guidance": s.image_guidance,
            "aspect_ratio": s.image_aspect_ratio,
        }
        if style.negative and s.img_neg_prompt_key:
            payload[s.img_neg_prompt_key] = style.negative
        return s.image_model, payload

    def video_request(self, image_bytes: bytes, content_type: Optional[str], style_id: str) -> Tuple[str, Dict[str, Any]]:
        s = self.settings
        style = resolve(style_id, JobKind.VIDEO)
        payload: Dict[str, Any] = {
            s.video_input_key: to_data_url(image_bytes, content_type),
        }
        if s.video_prompt_key:
            payload[s.video_prompt_key] = build_video_prompt(style)
        if s.video_fps:
            payload["fps"] = s.video_fps
        if s.video_resolution:
            payload["resolution"] = s.video_resolution
        if style.alternate_model:
            payload["duration"] = style.duration
            payload["motion_strength"] = style.motion_strength
            return s.video_dance_model, payload
        return s.video_model, payload

    async def submit(
        self,
        image_bytes: bytes,
        style_id: str,
        kind: JobKind,
        content_type: Optional[str] = None,
    ) -> SubmissionResult:
        """
        Send one prediction to the provider and return the client-facing result.
        Image jobs get a freshly tracked handle; video jobs return the provider id.
        Raises SubmissionError on any provider failure; nothing is tracked then.
        """
        kind = JobKind(kind)
        if kind is JobKind.VIDEO:
            model, payload = self.video_request(image_bytes, content_type, style_id)
        else:
            model, payload = self.image_request(image_bytes, content_type, style_id)

        try:
            provider_id = await self.provider.create_prediction(model, payload)
        except ProviderError as e:
            raise SubmissionError(str(e)) from e

        logger.info("submitted %s job style=%r model=%s prediction=%s", kind.value, style_id, model, provider_id)
        if kind is JobKind.VIDEO:
            return ProviderSubmission(provider_id=provider_id)
        return HandleSubmission(handle=self.tracker.track(provider_id), provider_id=provider_id)

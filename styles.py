# styles.py
# ------------------------------------------------------------------------------------
#  Style catalog: maps a client style id to prompt fragments (image) or a
#  motion description (video). Unknown, empty or missing ids resolve to the
#  default entry of the table, never to an error.
# ------------------------------------------------------------------------------------

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union


class JobKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class ImageStyle:
    positive: str
    negative: str = ""


@dataclass(frozen=True)
class VideoStyle:
    motion: str
    alternate_model: bool = False
    duration: Optional[int] = None          # seconds, alternate model only
    motion_strength: Optional[float] = None  # 0..1, alternate model only


DEFAULT_IMAGE_STYLE = ImageStyle(
    positive=(
        "premium 3D cartoon render, soft global illumination, rounded friendly shapes, "
        "smooth clean materials, vibrant but tasteful colors"
    ),
    negative="",
)

DEFAULT_VIDEO_STYLE = VideoStyle(
    motion=(
        "cinematic living animation, the drawing gently comes alive, subtle breathing "
        "and natural idle movement, slow camera drift, soft magical particles"
    ),
)

IMAGE_STYLES: Dict[str, ImageStyle] = {
    "style_clay": ImageStyle(
        positive=(
            "handmade plasticine claymation figure, visible fingerprints and tool marks, "
            "soft studio lighting, slightly glossy clay surface, stop-motion set look"
        ),
        negative="smooth plastic, CGI, photorealistic skin, flat 2D shading",
    ),
    "style_anime": ImageStyle(
        positive=(
            "clean kid-friendly anime style, crisp lineart, smooth cel shading, "
            "bright but premium colors"
        ),
        negative="3D render, photorealism, muddy colors, sketchy lines",
    ),
    "style_pixar": ImageStyle(
        positive=(
            "premium kid-friendly 3D animation look, soft gradients, clean edges, "
            "gentle lighting, expressive eyes"
        ),
        negative="realism, uncanny face, harsh shadows",
    ),
    "style_watercolor": ImageStyle(
        positive=(
            "delicate watercolor painting, soft bleeding edges, visible paper grain, "
            "light pastel washes"
        ),
        negative="hard outlines, digital gradients, neon colors",
    ),
    "style_comic": ImageStyle(
        positive=(
            "bold comic book illustration, thick ink outlines, halftone dot shading, "
            "punchy saturated colors"
        ),
        negative="blurry, watercolor, photorealism",
    ),
    "style_plush": ImageStyle(
        positive=(
            "soft plush toy made of fuzzy felt fabric, visible stitching seams, "
            "button eyes, cozy warm lighting"
        ),
        negative="hard plastic, metal, sharp edges",
    ),
}

VIDEO_STYLES: Dict[str, VideoStyle] = {
    "vid_dance": VideoStyle(
        motion=(
            "energetic happy dance, rhythmic bouncing to the beat, arms swinging, "
            "playful full-body moves while staying on the spot"
        ),
        alternate_model=True,
        duration=5,
        motion_strength=0.85,
    ),
    "vid_wave": VideoStyle(
        motion="the character smiles and waves hello with one hand, gentle head tilt",
    ),
    "vid_blink": VideoStyle(
        motion="calm idle loop, soft blinking eyes, slow breathing, hair gently swaying",
    ),
    "vid_float": VideoStyle(
        motion="the character floats upward weightlessly, slow spin, dreamy sparkles drifting",
    ),
    "vid_magic": VideoStyle(
        motion="colorful magic sparkles swirl around the character, glowing light trails",
    ),
}

GenerationSpec = Union[ImageStyle, VideoStyle]


def _normalize(style_id: Optional[str]) -> str:
    return (style_id or "").strip().lower()


def resolve(style_id: Optional[str], kind: JobKind) -> GenerationSpec:
    """Look up a style in the table for ``kind``; fall back to that table's default."""
    key = _normalize(style_id)
    if JobKind(kind) is JobKind.VIDEO:
        return VIDEO_STYLES.get(key, DEFAULT_VIDEO_STYLE)
    return IMAGE_STYLES.get(key, DEFAULT_IMAGE_STYLE)


def catalog() -> Dict[str, List[str]]:
    return {
        JobKind.IMAGE.value: sorted(IMAGE_STYLES),
        JobKind.VIDEO.value: sorted(VIDEO_STYLES),
    }

"""Photo downscaling/recompression to keep member uploads small."""

import base64
import io
import math
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ..errors.exceptions import ImageRejected

MAX_BYTES = 2 * 1024 * 1024
HARD_LIMIT = 5 * 1024 * 1024
MAX_DIMENSION = 1024

# JPEG quality in percent
START_QUALITY = 90
MIN_QUALITY = 30
QUALITY_STEP = 10

MSG_UNREADABLE = "Could not read image. Try another file."
MSG_TOO_LARGE = "Photo is too large even after compression. Try a smaller image."
MSG_SOURCE_TOO_LARGE = "Photo must be smaller than 5MB."


@dataclass(frozen=True)
class NormalizedImage:
    data_url: str
    width: int
    height: int
    quality: int
    estimated_bytes: int

    @property
    def mime_type(self) -> str:
        return "image/jpeg"


def estimate_bytes(b64: str) -> int:
    """Decoded size of a base64 payload."""
    return math.ceil(len(b64) * 3 / 4)


def fit_within(width: int, height: int, max_dimension: int = MAX_DIMENSION):
    if width <= max_dimension and height <= max_dimension:
        return width, height
    ratio = min(max_dimension / width, max_dimension / height)
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def _encode_jpeg(img: Image.Image, quality: int) -> str:
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return base64.b64encode(buf.getvalue()).decode("ascii")


def _decode(source: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(source))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ImageRejected(MSG_UNREADABLE) from exc
    return img


def normalize_image(
    source: bytes,
    max_bytes: int = MAX_BYTES,
    max_dimension: int = MAX_DIMENSION,
    start_quality: int = START_QUALITY,
    min_quality: int = MIN_QUALITY,
    quality_step: int = QUALITY_STEP,
    hard_limit: int = HARD_LIMIT,
) -> NormalizedImage:
    """
    Downscale so the larger side is at most `max_dimension`, then re-encode as
    JPEG, lowering quality by `quality_step` until the estimated size fits
    `max_bytes` or `min_quality` is reached.

    Raises ImageRejected when the source is over `hard_limit`, cannot be
    decoded, or is still over budget at the quality floor.
    """
    if not source:
        raise ImageRejected(MSG_UNREADABLE)
    if len(source) > hard_limit:
        raise ImageRejected(MSG_SOURCE_TOO_LARGE)

    img = _decode(source)
    # JPEG has no alpha or palette
    if img.mode != "RGB":
        img = img.convert("RGB")

    width, height = fit_within(img.width, img.height, max_dimension)
    if (width, height) != img.size:
        img = img.resize((width, height), Image.LANCZOS)

    quality = start_quality
    b64 = _encode_jpeg(img, quality)
    while estimate_bytes(b64) > max_bytes and quality > min_quality:
        quality = max(min_quality, quality - quality_step)
        b64 = _encode_jpeg(img, quality)

    size = estimate_bytes(b64)
    if size > max_bytes:
        raise ImageRejected(MSG_TOO_LARGE)

    return NormalizedImage(
        data_url=f"data:image/jpeg;base64,{b64}",
        width=width,
        height=height,
        quality=quality,
        estimated_bytes=size,
    )

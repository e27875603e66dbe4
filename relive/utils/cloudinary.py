"""
URL helpers for media hosted on Cloudinary.

Cloudinary applies transformations through path segments, e.g.
https://res.cloudinary.com/<cloud>/image/upload/w_400,h_400,c_fill/q_auto/f_auto/<public_id>
so thumbnails and optimized variants are plain string rewrites of the stored URL.
"""
import re
from typing import List, Optional, Union

from relive.config import settings

CLOUDINARY_BASE = "https://res.cloudinary.com"

_PUBLIC_ID_RE = re.compile(r"/v\d+/(.+)\.\w+$")


def is_cloudinary_url(url: str) -> bool:
    return "cloudinary.com" in url or "res.cloudinary" in url


def get_public_id_from_url(url: str) -> Optional[str]:
    """Extract the public id from a versioned Cloudinary URL."""
    match = _PUBLIC_ID_RE.search(url)
    return match.group(1) if match else None


def _resolve_public_id(url: str) -> Optional[str]:
    if is_cloudinary_url(url):
        return get_public_id_from_url(url)
    # Any other absolute URL is not ours to transform
    if "://" in url:
        return None
    return url


def get_optimized_image_url(
    url: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Union[str, int] = "auto:good",
    format: str = "auto",
    crop: str = "limit",
    gravity: str = "auto",
) -> str:
    """
    Build a transformed image URL.

    Args:
        url: Cloudinary URL or bare public id
        width, height: Optional bounding box
        quality: Cloudinary quality setting (``auto``, ``auto:good``, 80, ...)
        format: Delivery format (``auto``, ``webp``, ...)
        crop: Crop mode used when a width or height is given
        gravity: Gravity used when cropping; ``auto`` is omitted from the URL

    Returns:
        The transformed URL, or the input unchanged when no public id is found
    """
    public_id = _resolve_public_id(url)
    if not public_id:
        return url

    transformations: List[str] = []
    if width or height:
        dimensions = []
        if width:
            dimensions.append(f"w_{width}")
        if height:
            dimensions.append(f"h_{height}")
        if crop:
            dimensions.append(f"c_{crop}")
        if gravity != "auto":
            dimensions.append(f"g_{gravity}")
        transformations.append(",".join(dimensions))

    transformations.append(f"q_{quality}")
    transformations.append(f"f_{format}")

    return f"{CLOUDINARY_BASE}/{settings.CLOUDINARY_CLOUD_NAME}/image/upload/{'/'.join(transformations)}/{public_id}"


def get_thumbnail_url(url: str, size: int = 400) -> str:
    return get_optimized_image_url(url, width=size, height=size, crop="fill", quality="auto")


def get_responsive_image_srcset(url: str, sizes: Optional[List[int]] = None) -> str:
    sizes = sizes or [400, 800, 1200, 1600]
    return ", ".join(
        f"{get_optimized_image_url(url, width=width)} {width}w" for width in sizes
    )


def get_blur_placeholder_url(url: str) -> str:
    return get_optimized_image_url(url, width=20, quality="auto:low", crop="fill")


def get_video_thumbnail_url(url: str) -> str:
    """Poster image taken from the first frame of a video."""
    public_id = _resolve_public_id(url)
    if not public_id:
        return url
    return (
        f"{CLOUDINARY_BASE}/{settings.CLOUDINARY_CLOUD_NAME}/video/upload/"
        f"w_800,h_800,c_fill,q_auto,f_auto,so_0/{public_id}.jpg"
    )


def get_optimized_video_url(
    url: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Union[str, int] = "auto",
    format: str = "auto",
) -> str:
    public_id = _resolve_public_id(url)
    if not public_id:
        return url

    transformations: List[str] = []
    if width or height:
        dimensions = []
        if width:
            dimensions.append(f"w_{width}")
        if height:
            dimensions.append(f"h_{height}")
        dimensions.append("c_limit")
        transformations.append(",".join(dimensions))

    transformations.append(f"q_{quality}")
    transformations.append(f"f_{format}")

    return f"{CLOUDINARY_BASE}/{settings.CLOUDINARY_CLOUD_NAME}/video/upload/{'/'.join(transformations)}/{public_id}"

"""
Media extraction for rich-text memory content.

The editor stores a memory body as HTML with embedded <img>, <video> and <audio>
nodes. Every save mirrors those nodes into Media rows so the gallery and stats
can query media without parsing HTML.
"""
import logging
import re
from typing import List, Dict, Optional

from bs4 import BeautifulSoup
from sqlalchemy.orm import Session

from relive.models.media import Media
from relive.models.memory import Memory
from relive.utils.cloudinary import is_cloudinary_url, get_thumbnail_url, get_video_thumbnail_url

logger = logging.getLogger(__name__)

MEDIA_TAGS = {"img": "image", "video": "video", "audio": "audio"}

UNSAFE_TAGS = ["script", "style", "iframe", "object", "embed", "form", "base", "meta", "link"]

URL_ATTRS = {
    "href", "src", "srcset", "action", "formaction", "xlink:href",
    "poster", "data", "background", "cite",
}
SCRIPT_SCHEMES = ("javascript:", "vbscript:")

# browsers ignore ASCII whitespace and control characters inside a URL scheme
_URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")

# Cloudinary: .../upload/[v123/]<public_id>[.ext]
_CLOUDINARY_ID_RE = re.compile(r"/upload/(?:v\d+/)?(.+?)(?:\.[^./]+)?$")


def extract_cloudinary_id(url: str) -> Optional[str]:
    match = _CLOUDINARY_ID_RE.search(url)
    return match.group(1) if match else None


def _media_sources(element) -> List[str]:
    sources = [element.get("src")]
    if element.name in ("video", "audio"):
        sources.extend(source.get("src") for source in element.find_all("source"))
    return [src.strip() for src in sources if src and src.strip()]


def parse_media_from_html(html_content: str) -> List[Dict]:
    """
    Parse editor HTML and collect every embedded media URL.

    Args:
        html_content: HTML string produced by the rich-text editor

    Returns:
        List of dicts with ``url``, ``type`` and ``cloudinary_id`` in document
        order. Data URIs (unsaved placeholders) are skipped and each URL is
        reported once.
    """
    if not html_content:
        return []

    soup = BeautifulSoup(html_content, "html.parser")
    media_items = []
    seen = set()

    for element in soup.find_all(list(MEDIA_TAGS)):
        media_type = MEDIA_TAGS[element.name]
        for url in _media_sources(element):
            if url.startswith("data:") or url in seen:
                continue
            seen.add(url)
            media_items.append({
                "url": url,
                "type": media_type,
                "cloudinary_id": extract_cloudinary_id(url) if is_cloudinary_url(url) else None,
            })

    return media_items


def _thumbnail_for(url: str, media_type: str) -> Optional[str]:
    if not is_cloudinary_url(url):
        return None
    if media_type == "image":
        return get_thumbnail_url(url)
    if media_type == "video":
        return get_video_thumbnail_url(url)
    return None


def build_media(memory_id: int, url: str, media_type: str, cloudinary_id: Optional[str] = None) -> Media:
    return Media(
        memory_id=memory_id,
        url=url,
        type=media_type,
        cloudinary_id=cloudinary_id,
        thumbnail_url=_thumbnail_for(url, media_type),
    )


def extract_and_store_media(db: Session, memory: Memory, html_content: str, update_mode: bool = False) -> int:
    """
    Mirror the media embedded in ``html_content`` into Media rows for ``memory``.

    In update mode the memory's existing media rows are deleted first, so the
    stored list matches the content exactly. The caller commits.

    Returns:
        Number of media rows inserted
    """
    if update_mode:
        # delete-orphan cascade removes the rows on flush
        memory.media.clear()
        db.flush()

    parsed_media = parse_media_from_html(html_content)
    for item in parsed_media:
        memory.media.append(build_media(memory.id, item["url"], item["type"], item["cloudinary_id"]))

    db.flush()
    logger.debug(f"Stored {len(parsed_media)} media items for memory {memory.id}")
    return len(parsed_media)


def get_media_stats(html_content: str) -> Dict[str, int]:
    media = parse_media_from_html(html_content)
    return {
        "images": sum(1 for m in media if m["type"] == "image"),
        "videos": sum(1 for m in media if m["type"] == "video"),
        "audio": sum(1 for m in media if m["type"] == "audio"),
        "total": len(media),
    }


def strip_html_tags(html_content: str) -> str:
    """Plain text of an HTML fragment with entities decoded and whitespace collapsed."""
    if not html_content:
        return ""
    text = BeautifulSoup(html_content, "html.parser").get_text(separator=" ")
    text = text.replace("\xa0", " ")
    return re.sub(r"\s+", " ", text).strip()


def _is_script_url(value) -> bool:
    """True for javascript:/vbscript: URLs, including ones padded with whitespace or control characters."""
    if isinstance(value, list):
        value = " ".join(value)
    if not isinstance(value, str):
        return False
    compact = _URL_NOISE_RE.sub("", value).lower()
    return compact.startswith(SCRIPT_SCHEMES)


def sanitize_html(html_content: str) -> str:
    """Drop active content from editor HTML, keeping text, formatting and media nodes."""
    if not html_content:
        return ""

    soup = BeautifulSoup(html_content, "html.parser")

    for element in soup(UNSAFE_TAGS):
        element.decompose()

    for element in soup.find_all(True):
        for attr in list(element.attrs):
            name = attr.lower()
            if name.startswith("on"):
                del element.attrs[attr]
            elif name in URL_ATTRS and _is_script_url(element.attrs[attr]):
                del element.attrs[attr]

    return str(soup)

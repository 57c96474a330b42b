"""URL-safe slug generation for sports, programs and uploaded file names."""

import re
import unicodedata
from typing import Dict, Optional


def slugify(text: str) -> str:
    """Convert text to a URL-safe slug (lowercase, hyphens, no special chars).

    Args:
        text: Text to slugify (e.g. "Flag Football").

    Returns:
        Slugified text (e.g. "flag-football").
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def sport_id(sport: Dict) -> Optional[str]:
    """Return the sport's stored id, or a slug of its title when the id is blank."""
    if sport.get("id"):
        return str(sport["id"])
    title = sport.get("title")
    return slugify(title) if title else None


def safe_filename(filename: Optional[str]) -> str:
    """Reduce an uploaded file name to a storage-safe "name.ext" (keeps the extension)."""
    if not filename:
        return "upload"
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, ext = base.rpartition(".")
    if not dot:
        stem, ext = base, ""
    cleaned = slugify(stem) or "upload"
    ext = re.sub(r"[^A-Za-z0-9]", "", ext).lower()
    return f"{cleaned}.{ext}" if ext else cleaned

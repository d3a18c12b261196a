import math
import re
import time

from app.config import WORDS_PER_MINUTE


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-")


def make_slug(title: str, now_ms: int | None = None) -> str:
    """URL slug made unique by a millisecond timestamp suffix, e.g. ``my-post-1725000000000``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{slugify(title)}-{now_ms}"


def reading_time(content: str) -> int:
    return math.ceil(len(content.split(" ")) / WORDS_PER_MINUTE)


def parse_tags(raw) -> list[str]:
    """Accept ``"a, b,c"`` or ``["a", " b"]`` and return trimmed, de-duplicated tags."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw

    tags = []
    for part in parts:
        tag = str(part).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags

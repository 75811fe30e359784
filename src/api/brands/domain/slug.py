"""URL slugs for brand workspaces."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator
from datetime import datetime

MAX_SLUG_LENGTH = 50
MAX_NUMERIC_SUFFIX = 10
FALLBACK_SLUG = "brand"

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, ASCII-fold and hyphenate a workspace name.

    >>> slugify("  Café Acme & Co.  ")
    'cafe-acme-co'
    """
    folded = (
        unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    )
    slug = _NON_ALPHANUMERIC.sub("-", folded.strip().lower()).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or FALLBACK_SLUG


def slug_candidates(base: str, now: datetime) -> Iterator[str]:
    """Slugs to try in order until one is free.

    ``base``, then ``base-1`` .. ``base-10``, then a timestamp suffix so the
    sequence always ends.
    """
    yield base
    for suffix in range(1, MAX_NUMERIC_SUFFIX + 1):
        yield f"{base}-{suffix}"
    yield f"{base}-{int(now.timestamp() * 1000)}"

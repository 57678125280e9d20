"""Groups file extensions into the MIME categories Tally expects in ``allowedFiles``."""

from __future__ import annotations

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

APPLICATION = "application/*"
IMAGE = "image/*"
TEXT = "text/*"

MIME_CATEGORIES = {
    # Documents & archives
    ".pdf": APPLICATION,
    ".doc": APPLICATION,
    ".docx": APPLICATION,
    ".xlsx": APPLICATION,
    ".zip": APPLICATION,
    # Images
    ".jpg": IMAGE,
    ".jpeg": IMAGE,
    ".png": IMAGE,
    # Text
    ".txt": TEXT,
    ".csv": TEXT,
}

# Tally lists CSV under application/* as well as its primary text/* category.
_ALSO_APPLICATION = {".csv"}


def classify(extensions: Iterable[str]) -> dict[str, list[str]]:
    """Convert a set of extensions to Tally's ``allowedFiles`` mapping.

    Unrecognized extensions are dropped rather than rejected.

    >>> classify({".pdf", ".jpg"})
    {'image/*': ['.jpg'], 'application/*': ['.pdf']}
    """
    allowed: dict[str, list[str]] = {}
    for ext in sorted(set(extensions)):
        category = MIME_CATEGORIES.get(ext)
        if category is None:
            logger.debug("Dropping unrecognized upload extension %r", ext)
            continue
        allowed.setdefault(category, []).append(ext)
        if ext in _ALSO_APPLICATION:
            bucket = allowed.setdefault(APPLICATION, [])
            if ext not in bucket:
                bucket.append(ext)
    return allowed

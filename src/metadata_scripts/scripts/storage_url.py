"""Cloud Storage URL matching.

Recognizes the URL shapes that point at a Cloud Storage object and extracts
the bucket and object name. Matching is purely syntactic.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import re
from typing import NamedTuple, Optional

BUCKET = r"([a-z0-9][-_.a-z0-9]*)"
OBJECT = r"(.+)"

# gs://<bucket> or gs://<bucket>/ names no object
BUCKET_PATTERN = re.compile(rf"gs://{BUCKET}/?")

# Preferred form: gs://<bucket>/<object>
GS_PATTERN = re.compile(rf"gs://{BUCKET}/{OBJECT}")

# http(s)://<bucket>.storage.googleapis.com/<object>
GS_HTTP_PATTERN_1 = re.compile(rf"https?://{BUCKET}\.storage\.googleapis\.com/{OBJECT}")

# http(s)://storage.cloud.google.com/<bucket>/<object>
GS_HTTP_PATTERN_2 = re.compile(rf"https?://storage\.cloud\.google\.com/{BUCKET}/{OBJECT}")

# http(s)://storage.googleapis.com/<bucket>/<object>
# Deprecated but still accepted:
# http(s)://commondatastorage.googleapis.com/<bucket>/<object>
GS_HTTP_PATTERN_3 = re.compile(
    rf"https?://(?:commondata)?storage\.googleapis\.com/{BUCKET}/{OBJECT}"
)

OBJECT_PATTERNS = (GS_PATTERN, GS_HTTP_PATTERN_1, GS_HTTP_PATTERN_2, GS_HTTP_PATTERN_3)


class StorageObject(NamedTuple):
    """Location of a Cloud Storage object."""

    bucket: str
    object_name: str


def match(reference: str) -> Optional[StorageObject]:
    """Match a reference against the known Cloud Storage URL shapes.

    Args:
        reference: URL string from metadata.

    Returns:
        StorageObject for the first matching shape, or None.
    """
    if BUCKET_PATTERN.fullmatch(reference):
        return None

    for pattern in OBJECT_PATTERNS:
        m = pattern.fullmatch(reference)
        if m and m.group(1) and m.group(2):
            return StorageObject(bucket=m.group(1), object_name=m.group(2))

    return None

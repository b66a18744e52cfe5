"""Script download.

Fetches the body of a script referenced by URL: authenticated Cloud Storage
read first when the URL names a bucket object, then a plain HTTP GET of the
original URL.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
from typing import Any, Callable, Optional

import requests
from google.cloud import storage

from metadata_scripts.scripts.storage_url import match

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a script cannot be downloaded."""

    pass


def _decode(data: bytes) -> str:
    # Undecodable bytes survive as surrogates; write_script restores them
    return data.decode("utf-8", errors="surrogateescape")


def download_gcs_object(
    bucket: str,
    object_name: str,
    client_factory: Optional[Callable[[], Any]] = None,
) -> str:
    """Read a Cloud Storage object using default application credentials.

    Args:
        bucket: Bucket name.
        object_name: Object name within the bucket.
        client_factory: Callable returning a storage client (defaults to storage.Client).

    Returns:
        Object content as text.
    """
    factory = client_factory or storage.Client
    client = factory()
    try:
        blob = client.bucket(bucket).blob(object_name)
        return _decode(blob.download_as_bytes())
    finally:
        client.close()


def download_url(url: str, timeout: Optional[float] = None) -> str:
    """Unauthenticated HTTP GET of url.

    Raises:
        FetchError: On connection failure or a non-2xx response.
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"failed to download {url}: {e}") from e
    return _decode(response.content)


def fetch_script(
    reference: str,
    client_factory: Optional[Callable[[], Any]] = None,
    timeout: Optional[float] = None,
) -> str:
    """Download the script a URL reference points at.

    Cloud Storage URLs are read through the storage client first. Any failure
    on that path falls back to a GET of the original reference, unchanged.

    Args:
        reference: Trimmed URL from metadata.
        client_factory: Storage client factory, see download_gcs_object.
        timeout: Timeout in seconds for the HTTP GET, None for no limit.

    Returns:
        Script body.

    Raises:
        FetchError: If the HTTP GET fails.
    """
    location = match(reference)
    if location is not None:
        try:
            return download_gcs_object(
                location.bucket, location.object_name, client_factory=client_factory
            )
        except Exception as e:
            logger.info("Failed to download GCS path: %s", e)
            logger.info("Trying unauthenticated download")

    return download_url(reference, timeout=timeout)

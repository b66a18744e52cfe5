# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Metadata server client for instance attributes."""

import json
import logging
from typing import Dict

import requests

from metadata_scripts.config import Config

logger = logging.getLogger(__name__)


class MetadataFetchError(Exception):
    """Raised when instance attributes cannot be retrieved."""

    pass


def get_metadata(config: Config) -> Dict[str, str]:
    """Fetch all instance attributes in a single request.

    Args:
        config: Runtime configuration (endpoint, flavor header, timeout).

    Returns:
        Mapping of attribute name to value.

    Raises:
        MetadataFetchError: On network failure, a non-2xx response, or a body
            that is not a flat JSON object of strings.
    """
    url = config.metadata_endpoint
    logger.debug("Querying metadata server: %s", url)

    try:
        response = requests.get(
            url,
            headers={"Metadata-Flavor": config.metadata_flavor},
            timeout=config.metadata_timeout,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        raise MetadataFetchError(f"failed to query metadata server: {e}") from e

    try:
        data = json.loads(response.text)
    except json.JSONDecodeError as e:
        raise MetadataFetchError(f"invalid JSON from metadata server: {e}") from e

    if not isinstance(data, dict):
        raise MetadataFetchError("metadata server returned a non-object JSON document")

    bad = sorted(k for k, v in data.items() if not isinstance(v, str))
    if bad:
        raise MetadataFetchError(f"non-string metadata values for: {', '.join(bad)}")

    return data

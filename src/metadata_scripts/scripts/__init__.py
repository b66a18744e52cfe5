"""Resolution and execution of metadata scripts.

Inline scripts run as-is; URL entries are downloaded from Cloud Storage or
plain HTTP first. Every script runs from a private temp directory that is
removed afterwards.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from metadata_scripts.scripts.fetcher import (
    FetchError,
    download_gcs_object,
    download_url,
    fetch_script,
)
from metadata_scripts.scripts.resolver import (
    ResolveError,
    kind_from_reference,
    resolve,
)
from metadata_scripts.scripts.runner import (
    RunError,
    build_command,
    run_script,
)
from metadata_scripts.scripts.storage_url import StorageObject, match

__all__ = [
    "StorageObject",
    "match",
    "fetch_script",
    "download_gcs_object",
    "download_url",
    "FetchError",
    "resolve",
    "kind_from_reference",
    "ResolveError",
    "run_script",
    "build_command",
    "RunError",
]

"""Script resolution.

Turns a metadata value into a runnable ScriptRecord. Inline scripts are used
as-is; URL entries are downloaded and typed by their file extension.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

from typing import Callable

from metadata_scripts.schemas import ScriptKind, ScriptRecord
from metadata_scripts.scripts.fetcher import fetch_script


class ResolveError(Exception):
    """Raised when a metadata value cannot be turned into a runnable script."""

    pass


def kind_from_reference(reference: str) -> ScriptKind:
    """Determine the concrete script kind from the last three characters of a URL.

    Raises:
        ResolveError: If the extension is not ps1, cmd or bat.
    """
    extension = reference[-3:]
    kind = ScriptKind.from_suffix(extension) if len(reference) >= 3 else None
    if kind is None:
        raise ResolveError(
            f"error getting script type from url path, path: {reference!r}, "
            f"parsed type: {extension!r}"
        )
    return kind


def resolve(
    raw_value: str,
    kind: ScriptKind,
    label: str,
    fetch: Callable[[str], str] = fetch_script,
) -> ScriptRecord:
    """Resolve a metadata value into a ScriptRecord of a concrete kind.

    Args:
        raw_value: Metadata attribute value.
        kind: Kind implied by the attribute name.
        label: Attribute name, carried onto the record.
        fetch: Callable downloading a URL reference.

    Returns:
        ScriptRecord whose kind is ps1, cmd or bat.

    Raises:
        ResolveError: If the URL extension or the kind is not recognized.
        FetchError: If the referenced script cannot be downloaded.
    """
    if kind in (ScriptKind.PS1, ScriptKind.CMD, ScriptKind.BAT):
        return ScriptRecord(kind=kind, body=raw_value, label=label)

    if kind is ScriptKind.URL:
        reference = raw_value.strip()
        target = kind_from_reference(reference)
        body = fetch(reference)
        # Downloaded content is a script, never another pointer
        return resolve(body, target, label, fetch=fetch)

    raise ResolveError(f"unknown script type: {kind!r}")

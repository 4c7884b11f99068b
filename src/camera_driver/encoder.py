from __future__ import annotations

import json
from collections.abc import Mapping


def encode_fields(fields: Mapping[str, str]) -> str:
    """Encode a flat str -> str mapping as a single-line JSON object.

    Keys are emitted in sorted order so identical state always produces
    identical bytes. Quotes and backslashes in keys or values are escaped.
    """
    if not isinstance(fields, Mapping):
        raise TypeError("fields must be a mapping")

    for key, value in fields.items():
        if not isinstance(key, str):
            raise TypeError(f"field name must be str, got {type(key).__name__}")
        if not isinstance(value, str):
            raise TypeError(f"field {key!r} must be str, got {type(value).__name__}")

    return json.dumps(dict(fields), sort_keys=True, separators=(",", ":"))

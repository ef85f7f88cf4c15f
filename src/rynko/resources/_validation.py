"""Request validation shared by the resource wrappers."""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from rynko.kernel.errors import ValidationError

OUTPUT_FORMATS = frozenset({"pdf", "excel", "csv"})
MAX_METADATA_BYTES = 10 * 1024

_SCALARS = (str, int, float, bool, type(None))


def validate_format(value: str) -> str:
    if value not in OUTPUT_FORMATS:
        raise ValidationError(
            f"Unsupported format {value!r}",
            errors=[{"field": "format", "reason": f"expected one of {sorted(OUTPUT_FORMATS)}"}],
        )
    return value


def validate_metadata(metadata: Mapping[str, Any] | None, field: str = "metadata") -> dict[str, Any] | None:
    """Metadata must be a flat mapping of scalars, at most 10 KB as JSON."""
    if metadata is None:
        return None
    errors = [
        {"field": f"{field}.{key}", "reason": "values must be str, int, float, bool or None"}
        for key, value in metadata.items()
        if not isinstance(value, _SCALARS)
    ]
    if errors:
        raise ValidationError("Metadata must be a flat object", errors=errors)
    size = len(json.dumps(dict(metadata), separators=(",", ":")).encode("utf-8"))
    if size > MAX_METADATA_BYTES:
        raise ValidationError(
            "Metadata exceeds 10KB",
            errors=[{"field": field, "reason": f"{size} bytes > {MAX_METADATA_BYTES}"}],
        )
    return dict(metadata)


def compact(**fields: Any) -> dict[str, Any]:
    """Drop ``None`` values so omitted options are not sent."""
    return {key: value for key, value in fields.items() if value is not None}


__all__ = ["MAX_METADATA_BYTES", "OUTPUT_FORMATS", "compact", "validate_format", "validate_metadata"]

from __future__ import annotations

from typing import Mapping, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} wajib diisi")
    return value.strip()


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    v = str(value).strip()
    return v or None


def clean_optional_fields(data: Mapping[str, object], fields: tuple[str, ...]) -> dict:
    """Copy ``data`` turning empty strings into None for the given fields."""
    out = dict(data)
    for f in fields:
        if f in out:
            out[f] = blank_to_none(out[f])  # type: ignore[arg-type]
    return out

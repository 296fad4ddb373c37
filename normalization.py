import re
from typing import Any, Dict, Mapping


def normalize_whitespace(value: str) -> str:
    """Collapse repeated whitespace and trim."""
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def normalize_code(code: str) -> str:
    """Lower-case an ASIN / EAN code the way the API indexes it."""
    return (code or "").lower()


def flatten_query(params: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten nested query parameters into bracket notation.

    {"filter": {"asin.in": "b0001"}} becomes {"filter[asin.in]": "b0001"}.
    """
    flat: Dict[str, str] = {}
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_query(value, name))
        elif isinstance(value, (list, tuple)):
            flat[name] = ",".join(str(item) for item in value)
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        elif value is not None:
            flat[name] = str(value)
    return flat

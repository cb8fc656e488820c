import re
import unicodedata


def _cleanup(value: str) -> str:
    value = unicodedata.normalize("NFKD", value)
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    value = re.sub(r"[^a-zA-Z0-9]+", "-", value)
    value = re.sub(r"-{2,}", "-", value)
    return value.strip("-").lower()


def slugify(value: str) -> str:
    return _cleanup(value) or "form"


def field_key(value: str) -> str:
    base = _cleanup(value).replace("-", "_")
    if not base:
        return "field"
    if not re.match(r"^[a-zA-Z]", base):
        return f"field_{base}"
    return base

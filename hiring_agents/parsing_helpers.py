from typing import Any, Iterable, List, Optional


def string_list(value: Any) -> List[str]:
    """Normalize a model field that should be a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    items = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


def text_field(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    text = str(value).strip()
    return text or default


def optional_text(value: Any) -> Optional[str]:
    return text_field(value) or None


def choice(value: Any, allowed: Iterable[str], default: str) -> str:
    """Return ``value`` if it is one of ``allowed`` (case-insensitive), else ``default``."""
    text = text_field(value)
    for option in allowed:
        if text.lower() == option.lower():
            return option
    return default


def dict_list(value: Any) -> List[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def justification(data: Any, key: str) -> str:
    if not isinstance(data, dict):
        return ""
    return text_field(data.get(key))

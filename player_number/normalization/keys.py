from typing import Any, Dict


def normalize_key(key: str) -> str:
    """PascalCase feed key -> camelCase; 'ID' is special-cased to 'id'."""
    if key == "ID":
        return "id"
    if key[:1].isupper() and key[:1].isascii():
        return key[0].lower() + key[1:]
    return key


def normalize_keys(obj: Dict[str, Any]) -> Dict[str, Any]:
    """Rewrites the keys of one decoded JSON object.

    Used as the ``object_hook`` of ``json.loads``, which calls it for every
    object in the document, innermost first, so nested objects are covered
    without a separate tree walk. When a rewritten key collides with a key
    that was already lower case, the rewritten key's value is kept.
    """
    normalized: Dict[str, Any] = {}
    rewritten = set()
    for key, value in obj.items():
        new_key = normalize_key(key)
        if new_key != key:
            rewritten.add(new_key)
        elif key in rewritten:
            continue
        normalized[new_key] = value
    return normalized

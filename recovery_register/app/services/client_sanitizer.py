"""
Client Sanitizer

Strips or masks privacy-sensitive fields before data crosses to an
untrusted context (the browser, a log sink). Every function here is pure:
no I/O and no logging of the values being removed.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

DEFAULT_SENSITIVE_FIELDS = frozenset(
    {
        "email",
        "real_name",
        "realName",
        "name",
        "phone",
        "password_hash",
        "passwordHash",
        "oauth_profile",
        "oauthProfile",
        "oauth_tokens",
        "oauthTokens",
        "recovery_hash",
        "recoveryHash",
    }
)

# Extra keys that must never reach a log sink in raw form
LOG_SENSITIVE_FIELDS = frozenset({"password", "new_password", "current_password", "token"})


def _as_mapping(record: Any) -> Optional[Mapping[str, Any]]:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record
    if hasattr(record, "model_dump"):
        return record.model_dump()
    raise TypeError(f"Cannot sanitize {type(record).__name__}")


def _scrub(value: Any, sensitive: frozenset) -> Any:
    if isinstance(value, Mapping):
        return {k: _scrub(v, sensitive) for k, v in value.items() if k not in sensitive}
    if isinstance(value, (list, tuple)):
        return [_scrub(item, sensitive) for item in value]
    return value


def sanitize(record: Any, extra_sensitive_fields: Iterable[str] = ()) -> Optional[Dict[str, Any]]:
    """
    Return a copy of record without any sensitive key, at any nesting depth.

    Accepts plain mappings as well as pydantic/SQLModel objects.
    """
    data = _as_mapping(record)
    if data is None:
        return None
    sensitive = DEFAULT_SENSITIVE_FIELDS | frozenset(extra_sensitive_fields)
    return _scrub(data, sensitive)


def sanitize_many(records: Iterable[Any], extra_sensitive_fields: Iterable[str] = ()) -> List[Dict[str, Any]]:
    extra = tuple(extra_sensitive_fields)
    return [sanitize(record, extra) for record in records]


def mask_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    local, sep, domain = email.partition("@")
    if not sep or not domain:
        return "****"
    return f"{local[:2]}****@{domain}"


def mask_phone(phone: Optional[str]) -> Optional[str]:
    if not phone:
        return None
    digits = [c for c in str(phone) if c.isdigit()]
    if len(digits) < 4:
        return "***-***-****"
    return "***-***-" + "".join(digits[-4:])


def mask_real_name(name: Optional[str]) -> Optional[str]:
    if not name or not name.strip():
        return None
    parts = name.split()
    initials = [parts[0][0]] if len(parts) == 1 else [parts[0][0], parts[-1][0]]
    return " ".join(f"{initial}." for initial in initials)


DEFAULT_MASKS: Dict[str, Callable[[Any], Any]] = {
    "email": mask_email,
    "phone": mask_phone,
    "real_name": mask_real_name,
    "realName": mask_real_name,
}


def mask(
    record: Any,
    mask_fns: Optional[Mapping[str, Callable[[Any], Any]]] = None,
    extra_sensitive_fields: Iterable[str] = (),
) -> Optional[Dict[str, Any]]:
    """
    Partial-disclosure variant of sanitize (e.g. the admin listing).

    Fields with a mask function are replaced by the masked value; every
    other sensitive field is still dropped. Only top-level fields are masked.
    """
    data = _as_mapping(record)
    if data is None:
        return None
    masks = {**DEFAULT_MASKS, **(mask_fns or {})}
    sensitive = DEFAULT_SENSITIVE_FIELDS | frozenset(extra_sensitive_fields)

    result: Dict[str, Any] = {}
    for key, value in data.items():
        if key in masks:
            result[key] = masks[key](value) if value else None
        elif key in sensitive:
            continue
        else:
            result[key] = _scrub(value, sensitive)
    return result


def mask_identifier(identifier: Optional[str]) -> str:
    """Log-safe rendering of a login identifier (email or handle)."""
    if not identifier:
        return "<empty>"
    if "@" in identifier:
        return mask_email(identifier)
    return f"{identifier[:2]}****"


def sanitize_for_log(payload: Any) -> Optional[Dict[str, Any]]:
    data = _as_mapping(payload)
    if data is None:
        return None
    cleaned = _scrub(data, DEFAULT_SENSITIVE_FIELDS | LOG_SENSITIVE_FIELDS)
    if "identifier" in cleaned:
        cleaned["identifier"] = mask_identifier(cleaned["identifier"])
    return cleaned

"""Lenient coercion of caller-supplied values."""

from typing import Any, Iterable, List, MutableMapping, Optional


def sanitize_string(value: Any, default: Optional[str] = '') -> Optional[str]:
    """
    Coerce ``value`` to a trimmed string.

    Numbers are converted to their string representation; anything else that
    is not a string is treated as blank. Blank results are replaced with
    ``default``.

    Parameters
    ----------
    value : Any
    default : str or None

    Returns
    -------
    str or None

    """
    if isinstance(value, bool):
        value = ''
    elif isinstance(value, (int, float)):
        value = str(value)
    elif not isinstance(value, str):
        value = ''
    value = value.strip()
    if not value:
        return default
    return value


def sanitize_boolean(value: Any, default: bool = False) -> bool:
    """Coerce ``value`` to a bool: ``t``, ``y`` and ``1`` prefixes are true."""
    if value is True or value is False:
        return value
    sanitized = sanitize_string(value, None)
    if sanitized is None:
        return default
    return sanitized[0].lower() in ('t', 'y', '1')


def sanitize_ids(values: Any) -> List[str]:
    """Coerce ``values`` to a list of non-blank id strings, keeping order."""
    if isinstance(values, str) or not isinstance(values, Iterable):
        return []
    ids = []
    for value in values:
        sanitized = sanitize_string(value, None)
        if sanitized is not None and sanitized not in ids:
            ids.append(sanitized)
    return ids


def convert_boolean_filter_criteria(name: str, options: MutableMapping,
                                    criteria: MutableMapping,
                                    default: Any = 'any') -> None:
    """
    Translate a boolean filter option into a store criterion.

    An absent option, or the value ``'any'``, leaves ``criteria`` untouched.
    A false value matches records where the field is not true, so records
    that never had the field set are included.
    """
    value = options.get(name)
    if value is None:
        value = default
    if value == 'any':
        return
    if sanitize_boolean(value):
        criteria[name] = True
    else:
        criteria[name] = {'$ne': True}

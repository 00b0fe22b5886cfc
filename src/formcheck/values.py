"""Form values — the two shapes a submitted field can take.

A field is either a scalar string or an ordered list of values (checkboxes,
multi-selects, ``name[]`` style fields). Lists may nest. Everything is held
as strings; rules compare string representations.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from formcheck._internal.multimap import MultiValueMapping

type FormValue = str | list[FormValue]

# Same set PHP's trim() strips by default
DEFAULT_TRIM_CHARACTERS = " \t\n\r\0\x0b"

_LIST_SUFFIX = "[]"


def is_sequence(value: object) -> bool:
    """True when *value* is the multi-value shape."""
    return isinstance(value, list)


def is_blank(value: object) -> bool:
    """True for the empty scalar, the value every optional rule lets through."""
    return value is None or value == "" or value == b""


def empty_like(value: object) -> FormValue:
    """Return the empty value matching the shape of *value*."""
    return [] if is_sequence(value) else ""


def coerce_value(raw: Any) -> FormValue:
    """Convert a raw submitted value to a ``FormValue``.

    ``None`` becomes ``""``, tuples and lists become lists (recursively),
    anything else goes through ``str()``.
    """
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, (list, tuple)):
        return [coerce_value(item) for item in raw]
    return str(raw)


def normalize_form(form: object) -> dict[str, FormValue]:
    """Build the engine's value map from submitted data.

    Accepts a plain mapping or a ``MultiValueMapping``. For multi-value
    input a key ending in ``[]`` always becomes a list (the suffix is
    dropped); other keys become lists only when they repeat. Anything else
    yields an empty map.
    """
    if isinstance(form, MultiValueMapping):
        return _from_multimap(form)
    if isinstance(form, Mapping):
        return {str(key): coerce_value(raw) for key, raw in form.items()}
    return {}


def _from_multimap(form: MultiValueMapping) -> dict[str, FormValue]:
    values: dict[str, FormValue] = {}
    for key in form:
        items = [coerce_value(item) for item in form.get_list(key)]
        if key.endswith(_LIST_SUFFIX):
            values[key[: -len(_LIST_SUFFIX)]] = items
        elif len(items) == 1:
            values[key] = items[0]
        else:
            values[key] = items
    return values


def map_scalars(value: FormValue, fn: Callable[[str], str]) -> FormValue:
    """Apply *fn* to every scalar in *value*, descending into lists."""
    if is_sequence(value):
        return [map_scalars(item, fn) for item in value]
    return fn(value)


def as_field_list(fields: str | Iterable[str]) -> list[str]:
    """Accept one field name or several."""
    if isinstance(fields, str):
        return [fields]
    return list(fields)

"""Typed extraction of query parameters and JSON bodies into dataclasses.

Used by ``Request.bind_body(into=...)`` and ``Request.bind_query(...)``.
Each dataclass field is looked up by name in the source mapping and
converted to its annotated type when that type is ``str``, ``int``,
``float`` or ``bool``. Unknown keys are ignored; missing keys fall back to
the field default, and a missing required field is an error.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, get_type_hints


class ExtractionError(ValueError):
    """Raised when a mapping cannot be bound to a dataclass."""


def is_extractable_dataclass(annotation: Any) -> bool:
    """Return True if *annotation* is a dataclass type (not an instance)."""
    return isinstance(annotation, type) and dataclasses.is_dataclass(annotation)


def extract_dataclass[T](cls: type[T], data: Mapping[str, Any]) -> T:
    """Create a *cls* instance from *data*.

    Raises:
        ExtractionError: *cls* is not a dataclass, a required field is
            missing, or a value cannot be converted.
    """
    if not is_extractable_dataclass(cls):
        msg = f"{cls!r} is not a dataclass"
        raise ExtractionError(msg)

    try:
        hints = get_type_hints(cls)
    except NameError:
        hints = {f.name: f.type for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):  # type: ignore[arg-type]
        if not f.init or f.name not in data:
            continue
        kwargs[f.name] = _convert(f.name, data[f.name], hints.get(f.name, Any))

    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise ExtractionError(str(exc)) from exc


def _convert(name: str, value: Any, target: Any) -> Any:
    if target is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value)

    if target in (int, float):
        if isinstance(value, bool):
            msg = f"field {name!r}: expected {target.__name__}, got bool"
            raise ExtractionError(msg)
        try:
            return target(value)
        except (TypeError, ValueError) as exc:
            msg = f"field {name!r}: expected {target.__name__}, got {value!r}"
            raise ExtractionError(msg) from exc

    if target is str:
        return value.strip() if isinstance(value, str) else str(value)

    return value

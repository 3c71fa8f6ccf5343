"""JSON response encoding.

Bodies are encoded into a buffer before anything is sent, so a value
that cannot be represented still leaves the pipeline free to send a
well-formed error instead.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from jsonrest.errors import JSONSerializable


def _default(obj: Any) -> Any:
    """Fallback for values the stdlib encoder does not know.

    Order: ``to_json()``, dataclass instances, other mappings, sets and
    frozensets, then exceptions (their public attributes).
    """
    if isinstance(obj, JSONSerializable) and callable(obj.to_json):
        return obj.to_json()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if isinstance(obj, BaseException):
        public = getattr(obj, "__dict__", {})
        return {k: v for k, v in public.items() if not k.startswith("_")}
    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)


def encode_json(value: Any, *, indent: bool = True) -> bytes:
    """Encode *value* as UTF-8 JSON followed by a newline.

    With *indent*, output uses a two-space indent; otherwise it is compact
    with no whitespace between tokens. ``None`` encodes to an empty body.

    Raises ``TypeError`` or ``ValueError`` for values that cannot be
    represented (including NaN and infinities).
    """
    if value is None:
        return b""
    if indent:
        text = json.dumps(value, default=_default, ensure_ascii=False, allow_nan=False, indent=2)
    else:
        text = json.dumps(
            value,
            default=_default,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    return (text + "\n").encode("utf-8")

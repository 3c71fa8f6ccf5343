"""Path parameter converters for typed segments like ``{id:int}``.

A converter only constrains which segments match; captured values are
always handed to the endpoint as strings.
"""

import re

CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"-?\d+",
    "float": r"-?\d+(?:\.\d+)?",
    "path": r".+",
}


def compile_converter(param_type: str) -> re.Pattern[str]:
    """Return the anchored pattern for *param_type*.

    Raises ``KeyError`` for unknown converter names.
    """
    return re.compile(f"^{CONVERTERS[param_type]}$")

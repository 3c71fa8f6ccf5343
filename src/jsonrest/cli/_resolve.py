"""Router import resolution: ``"module:attribute"`` strings to Router instances."""

import importlib

from jsonrest.router import Router


def resolve_router(import_string: str) -> Router:
    """Resolve an import string to a jsonrest ``Router``.

    When the attribute is omitted it defaults to ``router``
    (``"myapi"`` resolves to ``myapi.router``). A zero-argument factory
    function is called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``Router``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Router):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Router):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a jsonrest.Router"
        raise TypeError(msg)

    return obj

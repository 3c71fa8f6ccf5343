"""Route and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonrest.router import RouteGroup


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:    ``users``       (is_param=False)
    Param:     ``{id}``/``:id`` (is_param=True, param_name="id")
    Typed:     ``{id:int}``     (param_type="int")
    Catch-all: ``{rest:path}``/``*rest`` (param_type="path")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A registered endpoint.

    ``endpoint`` is the bare endpoint; middleware is applied per request by
    walking ``group`` up to the root.
    """

    method: str
    path: str
    endpoint: Callable[..., Any]
    group: RouteGroup | None = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return getattr(self.endpoint, "__qualname__", repr(self.endpoint))


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful lookup."""

    route: Route
    path_params: dict[str, str]

"""Trie-based path-matching table.

One table is owned by the root router and shared by every group. Routes
are added while groups register endpoints; ``freeze()`` is called when
the router starts serving, after which the table is read-only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from jsonrest.errors import ConfigurationError, MethodNotAllowed, NotFound
from jsonrest.routing.params import CONVERTERS, compile_converter
from jsonrest.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/users"             -> [PathSegment("users")]
        "/users/{id}"        -> [..., PathSegment("{id}", is_param=True, param_name="id")]
        "/users/:id"         -> [..., PathSegment(":id", is_param=True, param_name="id")]
        "/users/{id:int}"    -> [..., PathSegment("{id:int}", ..., param_type="int")]
        "/files/*filepath"   -> [..., PathSegment("*filepath", ..., param_type="path")]

    Raises ``ConfigurationError`` for malformed patterns.
    """
    if not path.startswith("/"):
        msg = f"path must begin with '/': {path!r}"
        raise ConfigurationError(msg)

    parts = [part for part in path.strip("/").split("/") if part]
    segments: list[PathSegment] = []
    for i, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = f"unsupported <param> syntax in {path!r}; use {{param}} or :param"
            raise ConfigurationError(msg)

        if part.startswith("{") and part.endswith("}"):
            name, _, param_type = part[1:-1].partition(":")
            param_type = param_type or "str"
        elif part.startswith(":"):
            name, param_type = part[1:], "str"
        elif part.startswith("*"):
            name, param_type = part[1:], "path"
        else:
            segments.append(PathSegment(value=part))
            continue

        if not name.isidentifier():
            msg = f"invalid parameter name {name!r} in {path!r}"
            raise ConfigurationError(msg)
        if param_type not in CONVERTERS:
            msg = f"unknown converter {param_type!r} in {path!r}"
            raise ConfigurationError(msg)
        if param_type == "path" and i != len(parts) - 1:
            msg = f"catch-all parameter must be the last segment in {path!r}"
            raise ConfigurationError(msg)
        segments.append(
            PathSegment(value=part, is_param=True, param_name=name, param_type=param_type)
        )
    return segments


class _TrieNode:
    """A node in the route trie. Mutable until the table is frozen."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        self.param_child: _ParamEdge | None = None
        self.catch_all: _CatchAllEdge | None = None
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    param_name: str
    routes_by_method: dict[str, Route] = field(default_factory=dict)


class RouteTable:
    """Registers ``(method, path)`` pairs and resolves requests to them.

    Usage::

        table = RouteTable()
        table.add(Route("GET", "/users/{id}", get_user))
        table.freeze()
        match = table.match("GET", "/users/42")
        match.path_params  # {"id": "42"}
    """

    __slots__ = ("_frozen", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in registration order."""
        return list(self._routes)

    def freeze(self) -> None:
        """Make the table read-only. Idempotent."""
        self._frozen = True

    def add(self, route: Route) -> None:
        """Insert *route*.

        Raises ``ConfigurationError`` when the table is frozen, the pattern
        is malformed, the pair is already registered, or a parameter
        conflicts with one registered at the same position.
        """
        if self._frozen:
            msg = f"cannot register {route.method} {route.path}: router is already serving"
            raise ConfigurationError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.param_type == "path" and seg.is_param:
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(param_name=seg.param_name or "path")
                elif node.catch_all.param_name != seg.param_name:
                    self._conflict(route, node.catch_all.param_name)
                self._insert(node.catch_all.routes_by_method, route)
                return

            if seg.is_param:
                edge = node.param_child
                if edge is None:
                    edge = _ParamEdge(
                        param_name=seg.param_name or "",
                        param_type=seg.param_type,
                        regex=compile_converter(seg.param_type),
                        node=_TrieNode(),
                    )
                    node.param_child = edge
                elif (edge.param_name, edge.param_type) != (seg.param_name, seg.param_type):
                    self._conflict(route, edge.param_name)
                node = edge.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        self._insert(node.routes_by_method, route)

    def _insert(self, routes_by_method: dict[str, Route], route: Route) -> None:
        if route.method in routes_by_method:
            msg = f"route already registered: {route.method} {route.path}"
            raise ConfigurationError(msg)
        routes_by_method[route.method] = route
        self._routes.append(route)

    @staticmethod
    def _conflict(route: Route, existing: str) -> None:
        msg = (
            f"parameter in {route.method} {route.path} conflicts with "
            f"existing parameter {existing!r} at the same position"
        )
        raise ConfigurationError(msg)

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve a request to a registered route.

        Raises ``NotFound`` when no pattern matches the path, and
        ``MethodNotAllowed`` when it matches only under other methods.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        found = self._match_node(self._root, parts, 0, {})
        if found is None:
            raise NotFound()

        routes_by_method, params = found
        route = routes_by_method.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(routes_by_method))
        return RouteMatch(route=route, path_params=params)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Route], dict[str, str]] | None:
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, params
            return None

        part = parts[index]

        # Static segments win over parameters, parameters over catch-alls.
        child = node.children.get(part)
        if child is not None:
            found = self._match_node(child, parts, index + 1, params)
            if found is not None:
                return found

        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            found = self._match_node(
                edge.node, parts, index + 1, {**params, edge.param_name: part}
            )
            if found is not None:
                return found

        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.routes_by_method, {
                **params,
                node.catch_all.param_name: remaining,
            }

        return None

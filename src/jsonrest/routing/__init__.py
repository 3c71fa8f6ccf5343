"""Routing: the shared path-matching table.

Routes are inserted while groups register endpoints and the table is
frozen when the router starts serving. Lookup cost is proportional to
path depth.
"""

from jsonrest.routing.route import Route, RouteMatch
from jsonrest.routing.table import RouteTable, parse_path

__all__ = ["Route", "RouteMatch", "RouteTable", "parse_path"]

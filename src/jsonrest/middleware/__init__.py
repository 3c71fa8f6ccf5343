"""Middleware: plain functions from endpoint to endpoint.

A middleware is any callable matching::

    def mw(next: Endpoint) -> Endpoint

Built-in middleware:
    access_log -- METHOD path status duration, at INFO
    CORSMiddleware -- Cross-Origin Resource Sharing
    timeout -- 504 after a deadline (anyio)
"""

from jsonrest.middleware.access import access_log
from jsonrest.middleware.cors import CORSConfig, CORSMiddleware
from jsonrest.middleware.protocol import Endpoint, Middleware, apply_middleware, compose, identity
from jsonrest.middleware.timeout import timeout

__all__ = [
    "CORSConfig",
    "CORSMiddleware",
    "Endpoint",
    "Middleware",
    "access_log",
    "apply_middleware",
    "compose",
    "identity",
    "timeout",
]

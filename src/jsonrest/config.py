"""Router configuration.

``RouterConfig`` is a frozen dataclass. Options are plain functions from
one config to the next, applied in order, so a later option always wins
over an earlier one::

    router = Router(disable_indent(), enable_compression(BEST_SPEED))
    debug = router.group(dump_errors())

A group starts from its parent's config and applies its own options on
top. Only the root router's ``not_found`` and compression settings take
effect; they are inherited by groups but unused there.
"""

from __future__ import annotations

import zlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import TypeAlias

from jsonrest._internal.asgi import ASGIApp
from jsonrest.errors import ConfigurationError

DEFAULT_COMPRESSION = zlib.Z_DEFAULT_COMPRESSION
NO_COMPRESSION = zlib.Z_NO_COMPRESSION
BEST_SPEED = zlib.Z_BEST_SPEED
BEST_COMPRESSION = zlib.Z_BEST_COMPRESSION


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Settings for a router or group. Immutable after creation."""

    # Expose internal error tracebacks in responses (local debugging only)
    dump_errors: bool = False

    # Two-space indented JSON; compact single-line output when False
    indent: bool = True

    # gzip negotiation (root router only)
    compression: bool = False
    compression_level: int = DEFAULT_COMPRESSION
    compression_min_size: int = 0

    # ASGI app called for unmatched paths, bypassing the pipeline (root only)
    not_found: ASGIApp | None = None


Option: TypeAlias = Callable[[RouterConfig], RouterConfig]


def apply_options(config: RouterConfig, options: Iterable[Option]) -> RouterConfig:
    """Apply *options* to *config* in order."""
    for option in options:
        config = option(config)
    return config


def not_found_handler(handler: ASGIApp) -> Option:
    """Send unmatched requests to *handler* instead of the default 404."""

    def option(config: RouterConfig) -> RouterConfig:
        return replace(config, not_found=handler)

    return option


def disable_indent() -> Option:
    """Write compact JSON instead of two-space indented output."""

    def option(config: RouterConfig) -> RouterConfig:
        return replace(config, indent=False)

    return option


def enable_indent() -> Option:
    """Write two-space indented JSON (the default)."""

    def option(config: RouterConfig) -> RouterConfig:
        return replace(config, indent=True)

    return option


def enable_compression(level: int = DEFAULT_COMPRESSION, *, min_size: int = 0) -> Option:
    """Gzip responses for clients that accept it.

    *level* is ``DEFAULT_COMPRESSION`` (-1) or an integer from
    ``NO_COMPRESSION`` (0) to ``BEST_COMPRESSION`` (9). Bodies shorter than
    *min_size* bytes are sent as-is.

    Raises ``ConfigurationError`` immediately for an invalid level.
    """
    if level != DEFAULT_COMPRESSION and not NO_COMPRESSION <= level <= BEST_COMPRESSION:
        msg = f"invalid gzip compression level: {level}"
        raise ConfigurationError(msg)
    if min_size < 0:
        msg = f"invalid compression min_size: {min_size}"
        raise ConfigurationError(msg)

    def option(config: RouterConfig) -> RouterConfig:
        return replace(
            config,
            compression=True,
            compression_level=level,
            compression_min_size=min_size,
        )

    return option


def dump_errors(enabled: bool = True) -> Option:
    """Include tracebacks of unknown errors in responses."""

    def option(config: RouterConfig) -> RouterConfig:
        return replace(config, dump_errors=enabled)

    return option

"""Case-insensitive request headers.

Decoded once from the raw ASGI byte pairs. Lookups are by lower-cased
name; repeated headers keep every value in arrival order.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``headers["X-Token"]`` returns the first value; ``get_list`` returns all.
    """

    __slots__ = ("_items", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = raw
        self._items: dict[str, list[str]] = {}
        for name, value in raw:
            key = name.decode("latin-1").lower()
            self._items.setdefault(key, []).append(value.decode("latin-1"))

    @classmethod
    def from_pairs(cls, pairs: Mapping[str, str] | list[tuple[str, str]]) -> Headers:
        """Build headers from ``str`` pairs (tests and synthetic requests)."""
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls(tuple((k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in items))

    def __getitem__(self, key: str) -> str:
        return self._items[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        first = {k: v[0] for k, v in self._items.items()}
        return f"Headers({first!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._items.get(key.lower())
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return every value sent for *key*."""
        return list(self._items.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """The undecoded header pairs, as received."""
        return self._raw

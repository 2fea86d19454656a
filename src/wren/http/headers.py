"""Immutable multi-valued mappings: request headers and query parameters.

Both are ``Mapping[str, str]`` where ``__getitem__`` returns the first
value and ``get_list`` returns every value for a key. Values are decoded
once at construction; the mapping never changes afterwards.
"""

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl


class _MultiValueMapping(Mapping[str, str]):
    __slots__ = ("_data",)

    _data: dict[str, list[str]]

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        data: dict[str, list[str]] = {}
        for key, value in pairs:
            data.setdefault(self._normalize(key), []).append(value)
        object.__setattr__(self, "_data", data)

    @staticmethod
    def _normalize(key: str) -> str:
        return key

    def __getitem__(self, key: str) -> str:
        return self._data[self._normalize(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"{type(self).__name__}({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(self._normalize(key))
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(self._normalize(key), []))


class Headers(_MultiValueMapping):
    """Case-insensitive HTTP request headers.

    Built from the raw byte pairs of an ASGI scope; names are stored
    lower-cased.
    """

    __slots__ = ()

    @staticmethod
    def _normalize(key: str) -> str:
        return key.lower()

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> "Headers":
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)


class QueryParams(_MultiValueMapping):
    """Query string parameters, decoded with ``keep_blank_values``."""

    __slots__ = ()

    def __init__(self, query_string: bytes = b"") -> None:
        super().__init__(parse_qsl(query_string.decode("latin-1"), keep_blank_values=True))

"""Immutable query string parameters.

Implements ``Mapping[str, str]``. Built either from a raw query string
or from an already-parsed mapping handed over by the host.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs, urlencode


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _data: Parsed query as field name -> list of values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]

    __slots__ = ("_data",)

    def __init__(self, source: str | bytes | Mapping[str, object] | None = None) -> None:
        if source is None:
            data: dict[str, list[str]] = {}
        elif isinstance(source, (str, bytes)):
            raw = source.decode("latin-1") if isinstance(source, bytes) else source
            data = parse_qs(raw, keep_blank_values=True)
        else:
            data = {}
            for key, value in source.items():
                if isinstance(value, (list, tuple)):
                    data[str(key)] = [str(v) for v in value]
                else:
                    data[str(key)] = [str(value)]
        object.__setattr__(self, "_data", data)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def __str__(self) -> str:
        return urlencode(self._data, doseq=True)

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

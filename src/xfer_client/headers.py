"""Case-insensitive, insertion ordered header collection."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Mapping, MutableMapping, Tuple, Union

from .errors import HeaderFormatError

HeaderItem = Union[str, Tuple[str, Any], List[Any]]


class HeaderCollection(MutableMapping[str, str]):
    """Header name to value mapping that folds case on every lookup.

    Each entry remembers the casing used by the most recent ``add`` so that
    ``to_lines`` serializes names the way the caller wrote them. Overwriting
    a name keeps its original position.
    """

    def __init__(self, items: Mapping[str, Any] | Iterable[HeaderItem] | None = None) -> None:
        self._entries: dict[str, tuple[str, str]] = {}
        if items:
            self.add_all(items)

    @classmethod
    def parse(cls, block: str) -> "HeaderCollection":
        """Build a collection from a received header block.

        Repeated names are joined with ``", "`` and lines without a colon are
        skipped.
        """
        collection = cls()
        for line in block.splitlines():
            name, sep, value = line.partition(":")
            if not sep or not name.strip():
                continue
            collection.append(name, value)
        return collection

    def add(self, name: str, value: Any) -> "HeaderCollection":
        key, clean_name = _normalize_name(name)
        self._entries[key] = (clean_name, str(value).strip())
        return self

    def append(self, name: str, value: Any) -> "HeaderCollection":
        key, clean_name = _normalize_name(name)
        text = str(value).strip()
        existing = self._entries.get(key)
        if existing is not None:
            text = f"{existing[1]}, {text}"
        self._entries[key] = (clean_name, text)
        return self

    def add_all(self, items: Mapping[str, Any] | Iterable[HeaderItem]) -> "HeaderCollection":
        if isinstance(items, Mapping):
            for name, value in items.items():
                self.add(name, value)
            return self

        for item in items:
            if isinstance(item, str):
                name, sep, value = item.partition(":")
                if not sep:
                    raise HeaderFormatError(f"Malformed header line: {item!r}", context=item)
                self.add(name, value)
            elif isinstance(item, (tuple, list)) and len(item) == 2:
                self.add(item[0], item[1])
            else:
                raise HeaderFormatError(f"Unsupported header item: {item!r}", context=item)
        return self

    def get(self, name: str, default: str | None = None) -> str | None:  # type: ignore[override]
        entry = self._entries.get(name.strip().lower())
        return entry[1] if entry is not None else default

    def has(self, name: str) -> bool:
        return name.strip().lower() in self._entries

    def remove(self, name: str) -> "HeaderCollection":
        self._entries.pop(name.strip().lower(), None)
        return self

    def remove_all(self) -> "HeaderCollection":
        self._entries.clear()
        return self

    def to_lines(self) -> list[str]:
        return [f"{name}: {value}" for name, value in self._entries.values()]

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, (_, value) in self._entries.items()}

    def copy(self) -> "HeaderCollection":
        clone = HeaderCollection()
        clone._entries = dict(self._entries)
        return clone

    def __getitem__(self, name: str) -> str:
        entry = self._entries.get(name.strip().lower())
        if entry is None:
            raise KeyError(name)
        return entry[1]

    def __setitem__(self, name: str, value: Any) -> None:
        self.add(name, value)

    def __delitem__(self, name: str) -> None:
        key = name.strip().lower()
        if key not in self._entries:
            raise KeyError(name)
        del self._entries[key]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HeaderCollection({self.to_lines()!r})"


def _normalize_name(name: Any) -> tuple[str, str]:
    if not isinstance(name, str):
        raise HeaderFormatError(f"Header name must be a string, got {type(name).__name__}", context=name)
    clean = name.strip()
    if not clean:
        raise HeaderFormatError("Header name cannot be empty", context=name)
    return clean.lower(), clean


__all__ = ["HeaderCollection", "HeaderItem"]

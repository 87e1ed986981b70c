"""Platform header collections for template registrations.

Header names are case-insensitive; iteration is sorted by name so that the
serialized form is stable.
"""
from typing import Dict, Iterator, Mapping, MutableMapping, Optional, Tuple


class HeaderCollection(MutableMapping):
    """Case-insensitive, name-sorted mapping of header name to value.

    The spelling used when a header is first added is preserved.
    """

    element_name = "Headers"
    item_name = "Header"

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        self._items: Dict[str, Tuple[str, str]] = {}
        for key, value in (headers or {}).items():
            self.add(key, value)

    def add(self, key: str, value: str) -> None:
        """Add a header, rejecting names already present.

        Raises:
            KeyError: If a header with the same name (any case) exists
        """
        if key.lower() in self._items:
            raise KeyError(f"Duplicate header: {key}")
        self._items[key.lower()] = (key, value)

    def __getitem__(self, key: str) -> str:
        return self._items[key.lower()][1]

    def __setitem__(self, key: str, value: str) -> None:
        existing = self._items.get(key.lower())
        self._items[key.lower()] = (existing[0] if existing else key, value)

    def __delitem__(self, key: str) -> None:
        del self._items[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        for lowered in sorted(self._items):
            yield self._items[lowered][0]

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(key in self and self[key] == value for key, value in other.items())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"

    def copy(self) -> "HeaderCollection":
        return type(self)(dict(self.items()))


class WnsHeaderCollection(HeaderCollection):
    element_name = "WnsHeaders"
    item_name = "WnsHeader"


class MpnsHeaderCollection(HeaderCollection):
    element_name = "MpnsHeaders"
    item_name = "MpnsHeader"


class ApnsHeaderCollection(HeaderCollection):
    element_name = "ApnsHeaders"
    item_name = "ApnsHeader"

from collections.abc import Iterator, Mapping


class Metadata:
    """Ordered, multi-valued song metadata.

    Each name maps to one value, or to a list of unique values when the same
    directive occurs more than once with different values (e.g. two
    ``{artist: ...}`` lines).  Values are kept in insertion order.
    """

    def __init__(self, metadata: "Mapping | Metadata | None" = None):
        self._values: dict[str, list[str]] = {}
        if metadata is None:
            return
        entries = metadata.items()
        for name, value in entries:
            if isinstance(value, (list, tuple)):
                for v in value:
                    self.add(name, v)
            elif value is not None:
                self.add(name, value)

    def add(self, name: str, value) -> None:
        """Append *value* under *name* unless it is already present."""
        values = self._values.setdefault(name, [])
        value = str(value)
        if value not in values:
            values.append(value)

    def set(self, name: str, value) -> None:
        """Replace all values of *name*.  ``None`` removes the entry."""
        if value is None:
            self._values.pop(name, None)
        else:
            self._values[name] = [str(value)]

    def get(self, name: str, default=None) -> str | list[str] | None:
        values = self._values.get(name)
        if not values:
            return default
        if len(values) == 1:
            return values[0]
        return list(values)

    def get_single(self, name: str) -> str | None:
        """Return the lone value of *name*, or its first value if there are several."""
        values = self._values.get(name)
        return values[0] if values else None

    def get_all(self, name: str) -> list[str]:
        return list(self._values.get(name, []))

    def items(self) -> Iterator[tuple[str, str | list[str]]]:
        for name in self._values:
            yield name, self.get(name)

    def to_dict(self) -> dict[str, str | list[str]]:
        return dict(self.items())

    def clone(self) -> "Metadata":
        return Metadata(self)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, name: str) -> str | list[str]:
        if name not in self._values:
            raise KeyError(name)
        return self.get(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Metadata({self.to_dict()!r})"

"""Parameter tables keyed by tuples of atom type labels."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence


class ParameterTable:
    """
    Fixed-width parameter table keyed by atom type tuples.

    Each entry maps a tuple of ``arity`` type labels (1 for nonbonded, 2 for
    bonds, 3 for angles, 4 for torsions) to ``width`` floats.

    Lookups try the key as given and, for symmetric tables, its reverse.
    When a wildcard label is configured, keys whose terminal types are
    replaced by the wildcard are tried next, so general torsion entries
    such as ("X", "CT", "CT", "X") act as fallbacks.

    Example:
        bonds = ParameterTable(arity=2, width=2)
        bonds.add(("CT", "HC"), (340.0, 1.09))
        bonds.lookup("HC", "CT")  # (340.0, 1.09)
    """

    def __init__(
        self,
        arity: int,
        width: int,
        entries: Mapping[tuple[str, ...], Sequence[float]] | None = None,
        symmetric: bool = True,
        wildcard: str | None = None,
    ) -> None:
        if arity < 1:
            raise ValueError(f"arity must be positive, got {arity}")
        if width < 1:
            raise ValueError(f"width must be positive, got {width}")

        self.arity = arity
        self.width = width
        self.symmetric = symmetric
        self.wildcard = wildcard
        self._entries: dict[tuple[str, ...], tuple[float, ...]] = {}

        if entries is not None:
            for key, values in entries.items():
                self.add(key, values)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, tuple) and self.lookup(*key) is not None

    def add(self, types: Iterable[str], values: Sequence[float]) -> None:
        """
        Add or replace an entry.

        Raises:
            ValueError: If the key or value count does not match the table.
        """
        key = tuple(str(label) for label in types)
        if len(key) != self.arity:
            raise ValueError(f"Expected {self.arity} type labels, got {len(key)}")
        if len(values) != self.width:
            raise ValueError(f"Expected {self.width} values, got {len(values)}")
        self._entries[key] = tuple(float(value) for value in values)

    def get(self, *types: str) -> tuple[float, ...] | None:
        """Return the entry stored under exactly ``types``, or None."""
        return self._entries.get(tuple(types))

    def lookup(self, *types: str) -> tuple[float, ...] | None:
        """
        Return the best matching entry for ``types``, or None if not covered.
        """
        for key in self._candidates(tuple(types)):
            values = self._entries.get(key)
            if values is not None:
                return values
        return None

    def _candidates(self, key: tuple[str, ...]) -> Iterable[tuple[str, ...]]:
        yield key
        if self.symmetric:
            yield key[::-1]

        if self.wildcard is None or self.arity < 3:
            return

        # replace the terminal types, then one end at a time
        inner = key[1:-1]
        w = self.wildcard
        for candidate in (
            (key[0], *inner, w),
            (w, *inner, key[-1]),
            (w, *inner, w),
        ):
            yield candidate
            if self.symmetric:
                yield candidate[::-1]

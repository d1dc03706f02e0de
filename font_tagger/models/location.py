"""
Design-space locations used to key per-location scores of variable taggings.
"""
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional, Tuple


class Location(Mapping[str, float]):
    """
    Immutable mapping of axis tag to coordinate, e.g. ``{"wght": 400}``.

    Equality and hashing are structural: two locations are equal when they
    hold the same axis/value pairs, whatever order the axes were given in.
    Iteration keeps the insertion order, which is what CSV export writes.
    """

    __slots__ = ("_coords", "_key")

    def __init__(self, coords: Optional[Mapping[str, float]] = None, **axes: float):
        merged: Dict[str, float] = {}
        for source in (coords or {}, axes):
            for axis, value in source.items():
                merged[str(axis)] = float(value)
        self._coords = merged
        self._key: Tuple[Tuple[str, float], ...] = tuple(sorted(merged.items()))

    def __getitem__(self, axis: str) -> float:
        return self._coords[axis]

    def __iter__(self) -> Iterator[str]:
        return iter(self._coords)

    def __len__(self) -> int:
        return len(self._coords)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Location):
            return self._key == other._key
        if isinstance(other, Mapping):
            return self == Location(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        inner = ", ".join(f"{axis}={value:g}" for axis, value in self._coords.items())
        return f"Location({inner})"

"""
Nearest-neighbour lookup over family embeddings.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence, Set

import numpy as np

logger = logging.getLogger(__name__)


class SimilarityIndex:
    """
    Euclidean nearest neighbours of a family's embedding.

    Distances are taken over the query's components only. A candidate shorter
    than the query is padded with zeros; a longer one is truncated. Ties keep
    the index's insertion order.
    """

    def __init__(self, embeddings: Mapping[str, Sequence[float]]):
        self._names: List[str] = list(embeddings)
        self._vectors: Dict[str, np.ndarray] = {
            name: np.asarray(vector, dtype=float) for name, vector in embeddings.items()
        }
        self._warned: Set[str] = set()

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._vectors

    def _matrix(self, width: int) -> np.ndarray:
        matrix = np.zeros((len(self._names), width), dtype=float)
        for row, name in enumerate(self._names):
            vector = self._vectors[name][:width]
            matrix[row, : len(vector)] = vector
        return matrix

    def distances(self, name: str) -> Dict[str, float]:
        query = self._vectors.get(name)
        if query is None or not self._names:
            return {}
        deltas = self._matrix(len(query)) - query
        values = np.sqrt(np.sum(deltas * deltas, axis=1))
        return {n: float(d) for n, d in zip(self._names, values)}

    def similar_families(self, name: str, k: int = 10) -> List[str]:
        """
        Up to ``k`` families nearest to ``name``, nearest first.

        The query itself is dropped after the cut to ``k``, so it uses up one
        of the slots. Returns [] if ``name`` has no embedding.
        """
        if name not in self._vectors:
            if name not in self._warned:
                self._warned.add(name)
                logger.warning("No embedding for family %s", name)
            return []
        distances = self.distances(name)
        order = np.argsort(np.fromiter(distances.values(), dtype=float), kind="stable")
        nearest = [self._names[i] for i in order[: max(k, 0)]]
        return [n for n in nearest if n != name]

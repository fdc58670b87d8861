"""Exact cosine-similarity index backed by a NumPy matrix."""

from typing import Any

import numpy as np

from core.types import IndexedVector, SearchHit
from libs.vector_index.base_vector_index import BaseVectorIndex
from observability.logger import get_logger

logger = get_logger(__name__)


class BruteForceVectorIndex(BaseVectorIndex):
    """Scans every stored vector on each search.

    Rows are L2-normalised once at build time so a search is a single
    matrix-vector product. Zero vectors score 0 against every query.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._matrix = np.zeros((0, 0), dtype=np.float32)

    @property
    def provider_name(self) -> str:
        return "brute_force"

    @staticmethod
    def _normalize(matrix: np.ndarray) -> np.ndarray:
        norms = np.linalg.norm(matrix, axis=-1, keepdims=True)
        norms[norms == 0] = 1.0
        return matrix / norms

    def _index_vectors(self, entries: list[IndexedVector]) -> None:
        matrix = np.asarray([entry.vector for entry in entries], dtype=np.float32)
        self._matrix = self._normalize(matrix)
        logger.debug(
            f"Built brute-force index: {self._matrix.shape[0]} vectors, "
            f"{self._matrix.shape[1]} dimensions"
        )

    def _search(self, query_vector: list[float], k: int) -> list[SearchHit]:
        query = self._normalize(np.asarray(query_vector, dtype=np.float32))
        scores = self._matrix @ query

        # Stable sort on (-score, id); ids equal row positions
        order = np.lexsort((np.arange(len(scores)), -scores))[:k]

        return [
            SearchHit(
                chunk=self._entries[row].chunk,
                score=float(scores[row]),
                vector_id=self._entries[row].id,
            )
            for row in order
        ]

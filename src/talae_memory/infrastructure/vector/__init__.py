"""In-memory vector search."""

from .index import VectorIndex, VectorPartition, vector_norm

__all__ = ["VectorIndex", "VectorPartition", "vector_norm"]

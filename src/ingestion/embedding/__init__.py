# Embedding - Dense chunk encoding
from ingestion.embedding.dense_encoder import DenseEncoder

__all__ = ["DenseEncoder"]

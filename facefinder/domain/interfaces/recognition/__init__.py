from .embedding_oracle import EmbeddingOracle, select_primary_face

__all__ = ["EmbeddingOracle", "select_primary_face"]

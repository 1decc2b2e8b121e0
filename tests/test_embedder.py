"""
Tests for SentenceTransformerEmbedder (model mocked)
"""

from unittest.mock import patch

import numpy as np

from notes_rag.infrastructure.embeddings.sentence_transformer import SentenceTransformerEmbedder


class TestSentenceTransformerEmbedder:
    """Tests for SentenceTransformerEmbedder"""

    def test_model_loaded_lazily_once(self):
        with patch(
            "notes_rag.infrastructure.embeddings.sentence_transformer.SentenceTransformer"
        ) as model_cls:
            embedder = SentenceTransformerEmbedder("some/model")
            model_cls.assert_not_called()

            embedder.warmup()
            embedder.embed_query("hello")

        model_cls.assert_called_once_with("some/model")

    def test_embeddings_normalized(self):
        with patch(
            "notes_rag.infrastructure.embeddings.sentence_transformer.SentenceTransformer"
        ) as model_cls:
            SentenceTransformerEmbedder().embed_documents(("a", "b"))

        model_cls.return_value.encode.assert_called_once_with(
            ["a", "b"], convert_to_numpy=True, normalize_embeddings=True
        )

    def test_cosine_similarity(self):
        embedder = SentenceTransformerEmbedder()
        matrix = np.array([[1.0, 0.0], [0.0, 2.0], [1.0, 1.0]])

        scores = embedder.cosine_similarity(np.array([1.0, 0.0]), matrix)

        np.testing.assert_allclose(scores, [1.0, 0.0, 1 / np.sqrt(2)])

    def test_cosine_similarity_zero_vector(self):
        embedder = SentenceTransformerEmbedder()

        scores = embedder.cosine_similarity(np.zeros(2), np.array([[1.0, 0.0]]))

        np.testing.assert_allclose(scores, [0.0])

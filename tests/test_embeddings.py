"""
Tests for embedding providers and the dimension fitting helper.
"""

import math

import pytest

from brain.vector.embeddings import (
    DeterministicHashEmbedding,
    IEmbeddingProvider,
    SentenceTransformerEmbedding,
    fit_to_dimension,
)


def test_embedding_interface():
    """Test that the embedding provider implements the interface correctly."""
    embedder = DeterministicHashEmbedding(dimension=384)

    assert isinstance(embedder, IEmbeddingProvider)
    assert embedder.get_dimension() == 384


def test_deterministic_embedding():
    """Test that the same input always produces the same output."""
    embedder = DeterministicHashEmbedding(dimension=384)

    vector1 = embedder.embed_text("Hello, world!")
    vector2 = embedder.embed_text("Hello, world!")

    assert vector1 == vector2
    assert len(vector1) == 384


def test_different_inputs_produce_different_vectors():
    embedder = DeterministicHashEmbedding(dimension=384)
    assert embedder.embed_text("Hello, world!") != embedder.embed_text("Goodbye, world!")


def test_vectors_are_unit_length():
    embedder = DeterministicHashEmbedding(dimension=384)
    vector = embedder.embed_text("buy milk")

    assert math.sqrt(sum(v * v for v in vector)) == pytest.approx(1.0)
    assert all(v >= 0 for v in vector)


def test_character_folding():
    """Each character is averaged into its slot: (prev + code/255) / 2."""
    embedder = DeterministicHashEmbedding(dimension=2)

    # "ab": slot0 = (0 + 97/255)/2, slot1 = (0 + 98/255)/2, then normalized
    raw = [97 / 255 / 2, 98 / 255 / 2]
    norm = math.sqrt(sum(v * v for v in raw))
    assert embedder.embed_text("ab") == pytest.approx([v / norm for v in raw])


def test_long_text_wraps_slots():
    embedder = DeterministicHashEmbedding(dimension=4)
    assert len(embedder.embed_text("x" * 100)) == 4


def test_empty_text_is_zero_vector():
    assert DeterministicHashEmbedding(dimension=3).embed_text("") == [0.0, 0.0, 0.0]


@pytest.mark.parametrize("vector, dimension, expected", [
    ([1, 2], 4, [1.0, 2.0, 0.0, 0.0]),
    ([1, 2, 3, 4, 5], 3, [1.0, 2.0, 3.0]),
    ([1, 2, 3], 3, [1.0, 2.0, 3.0]),
    ([], 2, [0.0, 0.0]),
])
def test_fit_to_dimension(vector, dimension, expected):
    assert fit_to_dimension(vector, dimension) == expected


def test_sentence_transformer_loads_lazily():
    provider = SentenceTransformerEmbedding("all-MiniLM-L6-v2")
    assert provider._model is None
    assert provider.model_name == "all-MiniLM-L6-v2"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

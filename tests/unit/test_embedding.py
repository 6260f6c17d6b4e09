"""
Embedding Synthesis Unit Tests

Verifies the rolling hash, determinism, normalization and the
zero-vector policy for token-less input. Pure functions, no I/O.
"""

import math

import pytest

from mod_notes.models import EMBEDDING_DIMENSION
from mod_notes.retrieval.embedding import rolling_hash, synthesize_embedding


def _norm(vector: list[float]) -> float:
    return math.sqrt(sum(v * v for v in vector))


# ---------------------------------------------------------------------------
# Rolling hash
# ---------------------------------------------------------------------------


class TestRollingHash:
    """Java-style String.hashCode, absolute value."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("", 0),
            ("a", 97),
            ("ab", 97 * 31 + 98),
            ("hello", 99162322),
        ],
    )
    def test_known_values(self, token: str, expected: int) -> None:
        assert rolling_hash(token) == expected

    def test_wraps_to_signed_32_bit(self) -> None:
        # hashCode is Integer.MIN_VALUE; abs() lands just outside int32
        assert rolling_hash("polygenelubricants") == 2**31

    def test_negative_hash_is_made_positive(self) -> None:
        # Long enough to overflow at least once
        value = rolling_hash("internationalization")
        assert 0 <= value <= 2**31

    def test_counts_utf16_code_units(self) -> None:
        # U+1F600 is the surrogate pair D83D DE00
        assert rolling_hash("\U0001F600") == 0xD83D * 31 + 0xDE00


# ---------------------------------------------------------------------------
# synthesize_embedding
# ---------------------------------------------------------------------------


class TestSynthesizeEmbedding:
    def test_dimension(self) -> None:
        assert len(synthesize_embedding("test text")) == EMBEDDING_DIMENSION

    def test_deterministic(self) -> None:
        assert synthesize_embedding("machine learning") == synthesize_embedding(
            "machine learning"
        )

    @pytest.mark.parametrize(
        "text",
        ["test text", "a", "The quick brown fox", "naïve café", "x " * 200],
    )
    def test_unit_norm(self, text: str) -> None:
        assert abs(_norm(synthesize_embedding(text)) - 1) < 1e-2

    def test_case_and_whitespace_insensitive(self) -> None:
        assert synthesize_embedding("Hello   World") == synthesize_embedding(
            "hello world"
        )
        assert synthesize_embedding("\thello\nworld ") == synthesize_embedding(
            "hello world"
        )

    def test_token_position_matters(self) -> None:
        assert synthesize_embedding("deep learning") != synthesize_embedding(
            "learning deep"
        )

    def test_single_token_formula(self) -> None:
        raw = [math.sin(97 + d) * 0.1 for d in range(EMBEDDING_DIMENSION)]
        norm = _norm(raw)
        expected = [v / norm for v in raw]

        assert synthesize_embedding("a") == pytest.approx(expected, abs=1e-12)

    @pytest.mark.parametrize("text", ["", "   ", "\n\t "])
    def test_tokenless_input_is_zero_vector(self, text: str) -> None:
        vector = synthesize_embedding(text)

        assert len(vector) == EMBEDDING_DIMENSION
        assert all(v == 0.0 for v in vector)
        assert not any(math.isnan(v) for v in vector)

    def test_returns_native_floats(self) -> None:
        vector = synthesize_embedding("pgvector friendly")
        assert isinstance(vector, list)
        assert all(type(v) is float for v in vector)

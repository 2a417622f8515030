import numpy as np
import pytest

from industrial_rag.embeddings import EMBEDDING_DIM, cosine_similarity, embed, embed_many
from industrial_rag.errors import ConsistencyError


class TestEmbed:
    @pytest.mark.parametrize(
        "text",
        ["fox", "the quick brown fox", "Hello, World!", "ünïcödé text here", "a" * 2000],
    )
    def test_unit_norm_and_dimension(self, text):
        vec = embed(text)
        assert vec.shape == (EMBEDDING_DIM,)
        assert abs(np.linalg.norm(vec) - 1.0) < 1e-6

    def test_deterministic(self):
        a = embed("the quick brown fox jumps")
        b = embed("the quick brown fox jumps")
        assert np.array_equal(a, b)

    def test_case_insensitive(self):
        assert np.array_equal(embed("FOX"), embed("fox"))

    def test_single_character_hits_slot_zero(self):
        vec = embed("a")
        assert vec[0] == pytest.approx(1.0)
        assert np.count_nonzero(vec) == 1

    def test_character_stride(self):
        vec = embed("ab")
        expected = np.zeros(EMBEDDING_DIM)
        expected[0] = 0.097
        expected[7] = 0.098
        expected /= np.linalg.norm(expected)
        assert np.allclose(vec, expected)

    def test_second_word_shifts_by_one(self):
        vec = embed("x a")
        assert vec[1] > 0
        assert vec[0] > 0

    def test_whitespace_runs_do_not_shift_positions(self):
        assert np.array_equal(embed("  fox"), embed("fox"))

    @pytest.mark.parametrize("text", ["", "   ", "\n\t  \n", "\x00"])
    def test_degenerate_input_gives_zero_vector(self, text):
        vec = embed(text)
        assert vec.shape == (EMBEDDING_DIM,)
        assert not np.isnan(vec).any()
        assert not vec.any()

    def test_calls_do_not_share_buffers(self):
        first = embed("alpha")
        embed("beta")
        assert np.array_equal(first, embed("alpha"))

    def test_custom_dimension(self):
        assert embed("fox", dim=16).shape == (16,)


class TestEmbedMany:
    def test_matrix_shape(self):
        mat = embed_many(["a", "b c", ""])
        assert mat.shape == (3, EMBEDDING_DIM)
        assert np.array_equal(mat[1], embed("b c"))

    def test_empty_batch(self):
        assert embed_many([]).shape == (0, EMBEDDING_DIM)


class TestCosineSimilarity:
    @pytest.mark.parametrize("text", ["fox", "lorem ipsum dolor sit amet"])
    def test_self_similarity_is_one(self, text):
        v = embed(text)
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_shape_mismatch(self):
        with pytest.raises(ConsistencyError):
            cosine_similarity(np.ones(3), np.ones(4))

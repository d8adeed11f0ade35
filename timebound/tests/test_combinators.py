"""
Unit Tests: Averaging Combinators
"""

from datetime import timedelta

import numpy as np
import pytest

from timebound.history.combinators import NUMERIC, TIMEDELTA, Combinators, vector


class TestCombinators:
    """Tests for the ready-made combinator bundles."""

    def test_numeric(self):
        assert NUMERIC.average([1, 2, 6]) == 3

    def test_numeric_true_division(self):
        assert NUMERIC.average([1, 2]) == 1.5

    def test_timedelta(self):
        samples = [timedelta(milliseconds=10), timedelta(milliseconds=30)]
        assert TIMEDELTA.average(samples) == timedelta(milliseconds=20)

    def test_vector(self):
        combinators = vector(3)
        result = combinators.average([np.array([1.0, 2.0, 3.0]), np.array([3.0, 4.0, 5.0])])
        np.testing.assert_allclose(result, [2.0, 3.0, 4.0])

    def test_vector_zero_untouched(self):
        combinators = vector(2)
        combinators.average([np.ones(2)])
        np.testing.assert_array_equal(combinators.zero, np.zeros(2))

    def test_vector_invalid_dim(self):
        with pytest.raises(ValueError):
            vector(0)

    def test_empty_average(self):
        with pytest.raises(ValueError):
            NUMERIC.average([])

    def test_custom(self):
        concat = Combinators(zero="", add=lambda a, b: a + b, divide=lambda s, n: f"{s}/{n}")
        assert concat.average(["a", "b"]) == "ab/2"

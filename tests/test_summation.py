"""Unit tests for the three sum_to_n variants."""

import pytest

from summation import sum_to_n_a, sum_to_n_b, sum_to_n_c

VARIANTS = [sum_to_n_a, sum_to_n_b, sum_to_n_c]


@pytest.mark.parametrize("fn", VARIANTS)
class TestSumToN:
    def test_positive(self, fn):
        assert fn(5) == 15

    def test_zero(self, fn):
        assert fn(0) == 0

    def test_one(self, fn):
        assert fn(1) == 1

    def test_negative(self, fn):
        assert fn(-5) == -15
        assert fn(-1) == -1


def test_variants_agree():
    for n in range(-50, 51):
        assert sum_to_n_a(n) == sum_to_n_b(n) == sum_to_n_c(n)


def test_closed_form_handles_large_n():
    assert sum_to_n_a(10**12) == 10**12 * (10**12 + 1) // 2

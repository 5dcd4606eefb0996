import unittest

import numpy as np

from src.keygrad.infrastructure.functions import (
    add,
    broadcast_to,
    clip,
    div,
    exp,
    log,
    matmul,
    mean,
    mul,
    neg,
    reshape,
    select,
    slice_range,
    softmax,
    sqrt,
    square,
    sub,
    sum,
    sum_to,
    transpose,
    variance,
)

from ._gradcheck import assert_gradients_match


def rand(*shape, low=-1.0, high=1.0, seed=0):
    return np.random.default_rng(seed).uniform(low, high, size=shape)


class TestArithmeticGradients(unittest.TestCase):
    def test_binary_ops_with_broadcast(self):
        a, b = rand(2, 3, seed=1), rand(3, low=0.5, high=2.0, seed=2)
        for fn in (add, sub, mul, div):
            with self.subTest(op=fn.__name__):
                assert_gradients_match(self, fn, [a, b])

    def test_neg(self):
        assert_gradients_match(self, neg, [rand(4)])


class TestUnaryGradients(unittest.TestCase):
    def test_square_exp(self):
        x = rand(2, 3)
        assert_gradients_match(self, square, [x])
        assert_gradients_match(self, exp, [x])

    def test_log_sqrt_positive_domain(self):
        x = rand(3, 2, low=0.5, high=3.0)
        assert_gradients_match(self, log, [x])
        assert_gradients_match(self, sqrt, [x])

    def test_clip_masks_gradient(self):
        x = np.array([-2.0, -0.5, 0.3, 0.9, 4.0])
        assert_gradients_match(self, lambda v: clip(v, -1.0, 1.0), [x])


class TestReductionGradients(unittest.TestCase):
    def test_sum_variants(self):
        x = rand(2, 3, 4)
        assert_gradients_match(self, lambda v: sum(v), [x])
        assert_gradients_match(self, lambda v: sum(v, axis=1), [x])
        assert_gradients_match(self, lambda v: sum(v, axis=(0, 2), keepdims=True), [x])

    def test_mean_variants(self):
        x = rand(3, 4)
        assert_gradients_match(self, lambda v: mean(v), [x])
        assert_gradients_match(self, lambda v: mean(v, axis=-1, keepdims=True), [x])

    def test_variance(self):
        x = rand(3, 4)
        assert_gradients_match(self, lambda v: variance(v, axis=1), [x])
        assert_gradients_match(self, lambda v: variance(v), [x])

    def test_broadcast_to_and_sum_to(self):
        assert_gradients_match(self, lambda v: broadcast_to(v, (4, 2, 3)), [rand(2, 1)])
        assert_gradients_match(self, lambda v: sum_to(v, (1, 3)), [rand(4, 3)])


class TestShapeAndMatrixGradients(unittest.TestCase):
    def test_reshape_transpose(self):
        x = rand(2, 3, 4)
        assert_gradients_match(self, lambda v: reshape(v, (4, -1)), [x])
        assert_gradients_match(self, lambda v: transpose(v, 2, 0, 1), [x])
        assert_gradients_match(self, lambda v: transpose(v), [x])

    def test_matmul(self):
        assert_gradients_match(self, matmul, [rand(2, 3, seed=3), rand(3, 4, seed=4)])

    def test_batched_matmul_broadcast(self):
        assert_gradients_match(self, matmul, [rand(5, 2, 3, seed=5), rand(3, 2, seed=6)])

    def test_softmax(self):
        x = rand(2, 5)
        assert_gradients_match(self, lambda v: softmax(v), [x])
        assert_gradients_match(self, lambda v: softmax(v, axis=0), [x])


class TestIndexingGradients(unittest.TestCase):
    def test_select(self):
        x = rand(3, 4)
        assert_gradients_match(self, lambda v: select(v, 1, 2), [x])
        assert_gradients_match(self, lambda v: select(v, 0, -1), [x])

    def test_slice_range(self):
        x = rand(3, 5)
        assert_gradients_match(self, lambda v: slice_range(v, 1, 1, 4), [x])
        assert_gradients_match(self, lambda v: slice_range(v, -2, 1, 10), [x])


if __name__ == "__main__":
    unittest.main()

import unittest

import numpy as np

from src.keygrad.domain._errors import DivisionDegenerateError, ShapeMismatchError
from src.keygrad.infrastructure.tensor._tensor import Tensor


def tensor_from_np(arr) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=np.float32))


class TestTensorElementwise(unittest.TestCase):
    def test_same_shape_ops(self):
        a_np = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
        b_np = np.array([[5.0, 6.0], [7.0, 8.0]], dtype=np.float32)
        a, b = tensor_from_np(a_np), tensor_from_np(b_np)

        np.testing.assert_allclose(a.add(b).to_numpy(), a_np + b_np)
        np.testing.assert_allclose(a.sub(b).to_numpy(), a_np - b_np)
        np.testing.assert_allclose(a.mul(b).to_numpy(), a_np * b_np)
        np.testing.assert_allclose(a.div(b).to_numpy(), a_np / b_np, rtol=1e-6)

    def test_broadcasting_row_vector(self):
        a_np = np.arange(6, dtype=np.float32).reshape(2, 3)
        b_np = np.array([10.0, 20.0, 30.0], dtype=np.float32)
        out = tensor_from_np(a_np) + tensor_from_np(b_np)
        self.assertEqual(out.shape, (2, 3))
        np.testing.assert_allclose(out.to_numpy(), a_np + b_np)

    def test_broadcasting_both_sides(self):
        a_np = np.array([[1.0], [2.0]], dtype=np.float32)
        b_np = np.array([[10.0, 20.0, 30.0]], dtype=np.float32)
        out = tensor_from_np(a_np) * tensor_from_np(b_np)
        self.assertEqual(out.shape, (2, 3))
        np.testing.assert_allclose(out.to_numpy(), a_np * b_np)

    def test_scalar_operands(self):
        a_np = np.array([1.0, 2.0, 4.0], dtype=np.float32)
        a = tensor_from_np(a_np)
        np.testing.assert_allclose((a + 1).to_numpy(), a_np + 1)
        np.testing.assert_allclose((2 - a).to_numpy(), 2 - a_np)
        np.testing.assert_allclose((a * 3.0).to_numpy(), a_np * 3)
        np.testing.assert_allclose((1 / a).to_numpy(), 1 / a_np, rtol=1e-6)

    def test_operands_are_not_mutated(self):
        a = tensor_from_np([1.0, 2.0])
        b = tensor_from_np([3.0, 4.0])
        _ = a + b
        np.testing.assert_allclose(a.to_numpy(), [1.0, 2.0])
        np.testing.assert_allclose(b.to_numpy(), [3.0, 4.0])

    def test_incompatible_shapes_raise(self):
        a = tensor_from_np(np.zeros((2, 3)))
        b = tensor_from_np(np.zeros((4,)))
        with self.assertRaises(ShapeMismatchError) as cm:
            a.add(b)
        self.assertEqual(cm.exception.shape_a, (2, 3))
        self.assertEqual(cm.exception.shape_b, (4,))

    def test_zero_sized_divisor_raises(self):
        a = tensor_from_np(np.ones((1,)))
        b = tensor_from_np(np.ones((0,)))
        with self.assertRaises(DivisionDegenerateError):
            a.div(b)

    def test_empty_by_empty_division_is_allowed(self):
        a = tensor_from_np(np.ones((0, 3)))
        b = tensor_from_np(np.ones((0, 3)))
        self.assertEqual(a.div(b).shape, (0, 3))

    def test_unsupported_operand_type(self):
        with self.assertRaises(TypeError):
            tensor_from_np([1.0]).add("x")


class TestTensorUnary(unittest.TestCase):
    def test_unary_ops(self):
        x_np = np.array([0.25, 1.0, 4.0], dtype=np.float32)
        x = tensor_from_np(x_np)
        np.testing.assert_allclose((-x).to_numpy(), -x_np)
        np.testing.assert_allclose(x.square().to_numpy(), x_np**2)
        np.testing.assert_allclose(x.exp().to_numpy(), np.exp(x_np), rtol=1e-6)
        np.testing.assert_allclose(x.log().to_numpy(), np.log(x_np), rtol=1e-6)
        np.testing.assert_allclose(x.sqrt().to_numpy(), np.sqrt(x_np), rtol=1e-6)

    def test_clip(self):
        x = tensor_from_np([-2.0, 0.5, 3.0])
        np.testing.assert_allclose(x.clip(-1.0, 1.0).to_numpy(), [-1.0, 0.5, 1.0])
        np.testing.assert_allclose(x.clip(min_value=0.0).to_numpy(), [0.0, 0.5, 3.0])

    def test_clip_invalid_bounds(self):
        x = tensor_from_np([1.0])
        with self.assertRaises(ValueError):
            x.clip()
        with self.assertRaises(ValueError):
            x.clip(2.0, 1.0)


if __name__ == "__main__":
    unittest.main()

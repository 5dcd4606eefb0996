import unittest

import numpy as np

from src.keygrad.domain._errors import ShapeMismatchError
from src.keygrad.infrastructure.tensor._tensor import Tensor


def tensor_from_np(arr) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=np.float32))


class TestTensorFactories(unittest.TestCase):
    def test_constructor_zero_initializes(self):
        t = Tensor((2, 3))
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.dtype, np.float32)
        np.testing.assert_allclose(t.to_numpy(), np.zeros((2, 3)))

    def test_ones_and_full(self):
        np.testing.assert_allclose(Tensor.ones((2,)).to_numpy(), [1.0, 1.0])
        np.testing.assert_allclose(Tensor.full((2, 2), 7.0).to_numpy(), np.full((2, 2), 7.0))

    def test_from_numpy_copies(self):
        arr = np.array([1.0, 2.0], dtype=np.float32)
        t = Tensor.from_numpy(arr)
        arr[0] = 100.0
        self.assertEqual(t.get((0,)), 1.0)

    def test_to_numpy_returns_copy(self):
        t = tensor_from_np([1.0, 2.0])
        out = t.to_numpy()
        out[0] = 9.0
        self.assertEqual(t.get((0,)), 1.0)

    def test_copy_from_numpy_shape_check(self):
        t = Tensor((2,))
        t.copy_from_numpy(np.array([3.0, 4.0]))
        np.testing.assert_allclose(t.to_numpy(), [3.0, 4.0])
        with self.assertRaises(ShapeMismatchError):
            t.copy_from_numpy(np.zeros((3,)))

    def test_item(self):
        self.assertEqual(tensor_from_np(5.0).item(), 5.0)
        self.assertEqual(tensor_from_np([[2.0]]).item(), 2.0)
        with self.assertRaises(ValueError):
            tensor_from_np([1.0, 2.0]).item()


class TestTensorViews(unittest.TestCase):
    def test_reshape_and_infer(self):
        t = tensor_from_np(np.arange(6))
        self.assertEqual(t.reshape(2, 3).shape, (2, 3))
        self.assertEqual(t.reshape((3, -1)).shape, (3, 2))

    def test_reshape_incompatible_count(self):
        t = tensor_from_np(np.arange(6))
        with self.assertRaises(ShapeMismatchError):
            t.reshape(4, 2)
        with self.assertRaises(ShapeMismatchError):
            t.reshape(4, -1)
        with self.assertRaises(ShapeMismatchError):
            t.reshape(-1, -1)

    def test_transpose_default_and_explicit(self):
        x_np = np.arange(24, dtype=np.float32).reshape(2, 3, 4)
        t = tensor_from_np(x_np)
        np.testing.assert_allclose(t.transpose().to_numpy(), x_np.T)
        np.testing.assert_allclose(
            t.transpose(1, 0, 2).to_numpy(), np.transpose(x_np, (1, 0, 2))
        )
        np.testing.assert_allclose(t.permute(2, 0, 1).to_numpy(), np.transpose(x_np, (2, 0, 1)))

    def test_transpose_rejects_non_permutation(self):
        t = tensor_from_np(np.zeros((2, 3)))
        with self.assertRaises(ValueError):
            t.transpose(0, 0)
        with self.assertRaises(ValueError):
            t.permute()

    def test_set_on_view_does_not_leak_into_source(self):
        src = tensor_from_np(np.arange(6))
        view = src.reshape(2, 3)
        view.set((0, 0), 100.0)
        self.assertEqual(view.get((0, 0)), 100.0)
        self.assertEqual(src.get((0,)), 0.0)

    def test_set_on_source_does_not_leak_into_view(self):
        src = tensor_from_np(np.arange(6))
        view = src.reshape(3, 2)
        src.set((5,), -1.0)
        self.assertEqual(src.get((5,)), -1.0)
        self.assertEqual(view.get((2, 1)), 5.0)

    def test_view_shares_buffer_until_written(self):
        src = tensor_from_np([1.0, 2.0])
        alias = src.view()
        self.assertIsNot(alias, src)
        self.assertTrue(np.shares_memory(np.asarray(alias), np.asarray(src)))
        alias.set((0,), 9.0)
        self.assertEqual(src.get((0,)), 1.0)
        self.assertEqual(alias.get((0,)), 9.0)

    def test_get_set_index_validation(self):
        t = Tensor((2, 2))
        with self.assertRaises(IndexError):
            t.get((0,))
        with self.assertRaises(IndexError):
            t.set((2, 0), 1.0)


class TestTensorBroadcastPrimitives(unittest.TestCase):
    def test_broadcast_to(self):
        t = tensor_from_np([1.0, 2.0, 3.0])
        out = t.broadcast_to((2, 3))
        self.assertEqual(out.shape, (2, 3))
        np.testing.assert_allclose(out.to_numpy(), [[1, 2, 3], [1, 2, 3]])

    def test_broadcast_to_allocates(self):
        t = tensor_from_np([[1.0], [2.0]])
        out = t.broadcast_to((2, 2))
        out.set((0, 1), 50.0)
        self.assertEqual(out.get((0, 0)), 1.0)
        self.assertEqual(t.get((0, 0)), 1.0)

    def test_broadcast_to_incompatible(self):
        with self.assertRaises(ShapeMismatchError):
            tensor_from_np([1.0, 2.0]).broadcast_to((2, 3))

    def test_sum_to_collapses_leading_and_size_one_axes(self):
        x_np = np.arange(24, dtype=np.float32).reshape(2, 3, 4)
        t = tensor_from_np(x_np)
        np.testing.assert_allclose(t.sum_to((4,)).to_numpy(), x_np.sum(axis=(0, 1)))
        np.testing.assert_allclose(
            t.sum_to((3, 1)).to_numpy(), x_np.sum(axis=(0, 2)).reshape(3, 1)
        )
        self.assertEqual(t.sum_to(()).shape, ())
        self.assertAlmostEqual(t.sum_to(()).item(), float(x_np.sum()))

    def test_sum_to_is_adjoint_of_broadcast(self):
        # <broadcast(x), y> == <x, sum_to(y)>
        rng = np.random.default_rng(0)
        x_np = rng.standard_normal((1, 3)).astype(np.float32)
        y_np = rng.standard_normal((4, 3)).astype(np.float32)
        lhs = float((tensor_from_np(x_np).broadcast_to((4, 3)).to_numpy() * y_np).sum())
        rhs = float((x_np * tensor_from_np(y_np).sum_to((1, 3)).to_numpy()).sum())
        self.assertAlmostEqual(lhs, rhs, places=4)

    def test_sum_to_incompatible(self):
        with self.assertRaises(ShapeMismatchError):
            tensor_from_np(np.zeros((2, 3))).sum_to((2,))


class TestTensorMatrix(unittest.TestCase):
    def test_matmul(self):
        a_np = np.arange(6, dtype=np.float32).reshape(2, 3)
        b_np = np.arange(12, dtype=np.float32).reshape(3, 4)
        out = tensor_from_np(a_np) @ tensor_from_np(b_np)
        np.testing.assert_allclose(out.to_numpy(), a_np @ b_np)

    def test_matmul_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            tensor_from_np(np.zeros((2, 3))).matmul(tensor_from_np(np.zeros((2, 3))))

    def test_softmax_rows_sum_to_one_and_is_stable(self):
        x = tensor_from_np([[1000.0, 1001.0, 1002.0], [-1.0, 0.0, 1.0]])
        y = x.softmax(axis=-1).to_numpy()
        self.assertTrue(np.all(np.isfinite(y)))
        np.testing.assert_allclose(y.sum(axis=-1), [1.0, 1.0], rtol=1e-6)
        np.testing.assert_allclose(y[0], y[1], rtol=1e-5)


if __name__ == "__main__":
    unittest.main()

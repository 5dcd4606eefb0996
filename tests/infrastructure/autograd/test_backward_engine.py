import unittest

import numpy as np

from src.keygrad.domain._errors import MissingGradientError, ShapeMismatchError
from src.keygrad.infrastructure._config import using_config
from src.keygrad.infrastructure.autograd._function import GraphFunction
from src.keygrad.infrastructure.autograd._variable import Variable
from src.keygrad.infrastructure.functions import add, div, exp, mul, square, sub
from src.keygrad.infrastructure.tensor._tensor import Tensor


def var(arr, requires_grad: bool = True, name=None) -> Variable:
    return Variable(np.asarray(arr, dtype=np.float32), requires_grad=requires_grad, name=name)


class TestConcreteScenario(unittest.TestCase):
    def test_broadcast_add_then_sum(self):
        a = var([[1.0, 2.0], [3.0, 4.0]], name="a")
        b = var([10.0, 20.0], name="b")
        c = a + b
        loss = c.sum()

        self.assertAlmostEqual(loss.item(), 70.0)
        loss.backward()

        np.testing.assert_allclose(a.grad.to_numpy(), [[1.0, 1.0], [1.0, 1.0]])
        np.testing.assert_allclose(b.grad.to_numpy(), [2.0, 2.0])
        self.assertEqual(b.grad.shape, (2,))


class TestAccumulation(unittest.TestCase):
    def test_diamond_graph(self):
        a_np = np.array([1.0, -2.0, 3.0], dtype=np.float32)
        a = var(a_np)
        c = a + a
        d = c * a
        d.backward()
        # d = 2a^2  ->  dd/da = 4a
        np.testing.assert_allclose(a.grad.to_numpy(), 4.0 * a_np, rtol=1e-6)

    def test_diamond_graph_scaled_seed(self):
        a_np = np.array([2.0, 5.0], dtype=np.float32)
        a = var(a_np)
        d = (a + a) * a
        d.backward(np.array([0.5, 3.0], dtype=np.float32))
        np.testing.assert_allclose(
            a.grad.to_numpy(), 4.0 * a_np * np.array([0.5, 3.0]), rtol=1e-6
        )

    def test_uneven_branch_depths(self):
        # y = exp(x)^2 * x + x  (deep branch through exp/square, shallow via x)
        x_np = np.array([0.1, 0.5, -0.3], dtype=np.float32)
        x = var(x_np)
        deep = square(exp(x))
        y = add(mul(deep, x), x)
        y.backward()

        e2 = np.exp(2 * x_np)
        expected = 2 * e2 * x_np + e2 + 1
        np.testing.assert_allclose(x.grad.to_numpy(), expected, rtol=1e-5)

    def test_shared_intermediate_receives_full_gradient(self):
        x = var([3.0])
        h = x * x  # shared intermediate
        y = h * h + h  # y = x^4 + x^2
        y.backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [4 * 27.0 + 2 * 3.0], rtol=1e-6)
        # intermediates keep their gradient: dy/dh = 2h + 1 = 19
        np.testing.assert_allclose(h.grad.to_numpy(), [19.0], rtol=1e-6)

    def test_repeated_backward_accumulates(self):
        a = var([1.0, 2.0])
        (a * 3.0).sum().backward()
        (a * 3.0).sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), [6.0, 6.0])

        a.zero_grad()
        self.assertIsNone(a.grad)

    def test_accumulation_does_not_alias_previous_grad(self):
        a = var([1.0, 2.0])
        (a * 1.0).sum().backward()
        first = a.grad
        (a * 1.0).sum().backward()
        self.assertIsNot(a.grad, first)
        np.testing.assert_allclose(first.to_numpy(), [1.0, 1.0])


class TestDivisionAdjoint(unittest.TestCase):
    def test_broadcast_division_shapes_and_values(self):
        x_np = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]], dtype=np.float32)
        y_np = np.array([2.0, 4.0, 8.0], dtype=np.float32)
        g_np = np.array([[1.0, 0.5, 2.0], [-1.0, 3.0, 1.0]], dtype=np.float32)
        x, y = var(x_np), var(y_np)
        z = div(x, y)
        z.backward(g_np)

        self.assertEqual(x.grad.shape, (2, 3))
        self.assertEqual(y.grad.shape, (3,))
        np.testing.assert_allclose(x.grad.to_numpy(), g_np / y_np, rtol=1e-6)
        np.testing.assert_allclose(
            y.grad.to_numpy(), (g_np * (-x_np / y_np**2)).sum(axis=0), rtol=1e-6
        )


class TestShapeExactness(unittest.TestCase):
    SHAPE_PAIRS = [
        ((2, 3), (2, 3)),
        ((2, 3), (3,)),
        ((3,), (2, 3)),
        ((2, 1), (1, 3)),
        ((4, 1, 3), (2, 1)),
        ((), (2, 2)),
        ((2, 2), ()),
        ((1,), (5,)),
    ]

    def test_every_binary_op_returns_input_shapes(self):
        rng = np.random.default_rng(7)
        for op in (add, sub, mul, div):
            for sa, sb in self.SHAPE_PAIRS:
                with self.subTest(op=op.__name__, sa=sa, sb=sb):
                    a = var(rng.uniform(1.0, 2.0, size=sa))
                    b = var(rng.uniform(1.0, 2.0, size=sb))
                    op(a, b).backward()
                    self.assertEqual(a.grad.shape, sa)
                    self.assertEqual(b.grad.shape, sb)


class TestSeedHandling(unittest.TestCase):
    def test_default_seed_is_ones_for_non_scalar(self):
        a = var([1.0, 2.0, 3.0])
        (a * 2.0).backward()
        np.testing.assert_allclose(a.grad.to_numpy(), [2.0, 2.0, 2.0])

    def test_seed_shape_mismatch(self):
        a = var([1.0, 2.0])
        y = a * 2.0
        with self.assertRaises(ShapeMismatchError):
            y.backward(np.ones((3,), dtype=np.float32))

    def test_seed_accepts_tensor_and_variable(self):
        a = var([1.0, 2.0])
        (a * 1.0).backward(Tensor.full((2,), 2.0))
        (a * 1.0).backward(var([1.0, 1.0], requires_grad=False))
        np.testing.assert_allclose(a.grad.to_numpy(), [3.0, 3.0])

    def test_strict_scalar_seed(self):
        a = var([1.0, 2.0])
        y = a * 2.0
        with using_config(strict_scalar_seed=True):
            with self.assertRaises(MissingGradientError):
                y.backward()
            y.sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), [2.0, 2.0])

    def test_backward_on_leaf_sets_seed(self):
        a = var([1.0, 2.0])
        a.backward()
        np.testing.assert_allclose(a.grad.to_numpy(), [1.0, 1.0])

    def test_get_grad_before_backward_raises(self):
        a = var([1.0])
        self.assertIsNone(a.grad)
        with self.assertRaises(MissingGradientError):
            a.get_grad()


class TestEngineContracts(unittest.TestCase):
    def test_wrong_number_of_partials(self):
        class Broken(GraphFunction):
            def require_input_num(self):
                return 2

            def forward(self, a, b):
                return a.add(b)

            def backward(self, grad_out):
                return (grad_out,)

        a, b = var([1.0]), var([2.0])
        with self.assertRaises(RuntimeError):
            Broken()(a, b).backward()

    def test_wrong_partial_shape_detected(self):
        class BadShape(GraphFunction):
            def forward(self, x):
                return x.sum()

            def backward(self, grad_out):
                return (grad_out,)

        x = var([1.0, 2.0])
        y = BadShape()(x)
        with self.assertRaises(ShapeMismatchError):
            y.backward()
        self.assertIsNone(x.grad)

        with self.assertRaises(TypeError):
            with using_config(check_grad_shapes=False):
                pass

    def test_none_partial_is_skipped(self):
        class FirstOnly(GraphFunction):
            def require_input_num(self):
                return 2

            def forward(self, a, b):
                return a.mul(b)

            def backward(self, grad_out):
                return grad_out, None

        a, b = var([1.0]), var([2.0])
        FirstOnly()(a, b).backward()
        np.testing.assert_allclose(a.grad.to_numpy(), [1.0])
        self.assertIsNone(b.grad)

    def test_constant_inputs_get_no_grad(self):
        a = var([1.0, 2.0])
        c = var([3.0, 4.0], requires_grad=False)
        (a * c).sum().backward()
        np.testing.assert_allclose(a.grad.to_numpy(), [3.0, 4.0])
        self.assertIsNone(c.grad)

    def test_frozen_intermediate_stops_propagation(self):
        x = var([1.0, 2.0])
        w = var([3.0, 4.0])
        h = x * 2.0
        h.requires_grad = False

        (h * w).sum().backward()

        np.testing.assert_allclose(w.grad.to_numpy(), [2.0, 4.0])
        self.assertIsNone(h.grad)
        self.assertIsNone(x.grad)

    def test_frozen_branch_does_not_block_other_paths(self):
        x = var([1.0, 2.0])
        frozen = x * 3.0
        frozen.requires_grad = False

        (frozen + x * x).sum().backward()

        np.testing.assert_allclose(x.grad.to_numpy(), [2.0, 4.0])


if __name__ == "__main__":
    unittest.main()

"""Tests for kernel activations and their normalization."""

import numpy as np
import pytest

from lwr import kernel_activations, normalized_kernel_activations


def test_kernel_activations_shape():
    """Output shape (n_samples, n_basis), values in [0, 1]."""
    rng = np.random.RandomState(0)
    inputs = rng.randn(50, 3)
    centers = rng.randn(8, 3)
    widths = np.ones((8, 3))
    phi = kernel_activations(inputs, centers, widths)
    assert phi.shape == (50, 8)
    assert np.all(phi >= 0) and np.all(phi <= 1)


def test_kernel_activations_closed_form():
    """Product of per-dimension Gaussians with exp(-0.5 * d^2 / w^2)."""
    rng = np.random.RandomState(1)
    inputs = rng.randn(20, 2)
    centers = rng.randn(4, 2)
    widths = rng.uniform(0.5, 2.0, (4, 2))

    diff = inputs[:, None, :] - centers[None, :, :]
    expected = np.exp(-0.5 * np.sum(diff ** 2 / widths[None, :, :] ** 2, axis=2))

    phi = kernel_activations(inputs, centers, widths)
    np.testing.assert_allclose(phi, expected, rtol=1e-12)


def test_kernel_activation_at_center_is_one():
    centers = np.array([[1.0, -2.0]])
    widths = np.array([[0.3, 4.0]])
    phi = kernel_activations(centers, centers, widths)
    np.testing.assert_allclose(phi, [[1.0]])


def test_asymmetric_kernels_borrow_previous_width():
    """Left of a center, basis b > 0 uses the width of basis b - 1."""
    centers = np.array([[0.0], [10.0]])
    widths = np.array([[1.0], [3.0]])
    inputs = np.array([[-2.0], [8.0], [12.0]])

    phi = kernel_activations(inputs, centers, widths, asymmetric_kernels=True)

    # basis 0 always uses its own width
    np.testing.assert_allclose(phi[0, 0], np.exp(-0.5 * 4.0 / 1.0))
    # x=8 < c=10: width of basis 0
    np.testing.assert_allclose(phi[1, 1], np.exp(-0.5 * 4.0 / 1.0))
    # x=12 > c=10: own width
    np.testing.assert_allclose(phi[2, 1], np.exp(-0.5 * 4.0 / 9.0))


def test_symmetric_kernels_ignore_previous_width():
    centers = np.array([[0.0], [10.0]])
    widths = np.array([[1.0], [3.0]])
    inputs = np.array([[8.0], [12.0]])
    phi = kernel_activations(inputs, centers, widths, asymmetric_kernels=False)
    np.testing.assert_allclose(phi[:, 1], np.exp(-0.5 * 4.0 / 9.0))


@pytest.mark.parametrize("asymmetric", [False, True])
def test_normalized_rows_sum_to_one(asymmetric):
    rng = np.random.RandomState(2)
    inputs = rng.uniform(-1, 1, (30, 2))
    centers = rng.uniform(-1, 1, (6, 2))
    widths = np.full((6, 2), 0.5)
    normalized = normalized_kernel_activations(inputs, centers, widths, asymmetric)
    assert normalized.shape == (30, 6)
    np.testing.assert_allclose(normalized.sum(axis=1), 1.0, rtol=1e-12)


def test_normalized_single_basis_function_is_one():
    """With one basis function the result is exactly 1, even far from the center."""
    inputs = np.array([[0.0], [100.0], [-1e6]])
    normalized = normalized_kernel_activations(inputs, [[0.0]], [[0.1]])
    assert normalized.shape == (3, 1)
    assert np.all(normalized == 1.0)


def test_normalized_zero_sum_uses_global_floor():
    """A zero row sum adds max(row_sums) / 100000 to every row."""
    centers = np.array([[0.0], [1.0]])
    widths = np.array([[0.1], [0.1]])
    inputs = np.array([[0.0], [1000.0]])

    raw = kernel_activations(inputs, centers, widths)
    assert raw[1].sum() == 0.0

    normalized = normalized_kernel_activations(inputs, centers, widths)
    assert np.all(normalized[1] == 0.0)

    row_sum = raw[0].sum()
    expected = raw[0] / (row_sum + row_sum / 100000.0)
    np.testing.assert_allclose(normalized[0], expected, rtol=1e-12)
    assert normalized[0].sum() < 1.0


def test_two_basis_scenario():
    """Centers 0 and 10, widths 2: x=0 belongs to basis 0, x=5 is shared."""
    centers = np.array([[0.0], [10.0]])
    widths = np.array([[2.0], [2.0]])
    inputs = np.array([[0.0], [5.0]])

    phi = kernel_activations(inputs, centers, widths)
    assert phi[0, 0] > 1e4 * phi[0, 1]
    np.testing.assert_allclose(phi[1, 0], phi[1, 1])

    normalized = normalized_kernel_activations(inputs, centers, widths)
    np.testing.assert_allclose(normalized[0], [1.0, 0.0], atol=1e-5)
    np.testing.assert_allclose(normalized[1], [0.5, 0.5])


@pytest.mark.parametrize("func", [kernel_activations, normalized_kernel_activations])
def test_shape_mismatch_raises(func):
    with pytest.raises(ValueError, match="dimensions"):
        func(np.zeros((5, 3)), np.zeros((2, 2)), np.ones((2, 2)))
    with pytest.raises(ValueError, match="same shape"):
        func(np.zeros((5, 2)), np.zeros((2, 2)), np.ones((3, 2)))

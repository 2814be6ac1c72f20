"""
Gaussian kernel activations for Locally Weighted Regression.

Each basis function is a diagonal-covariance Gaussian, computed as the product
of one-dimensional Gaussians over the input dimensions:

    phi[i, b] = prod_d exp(-0.5 * (x[i,d] - c[b,d])^2 / w[b,d]^2)

With asymmetric kernels, a sample left of a centre uses the width of the
previous basis function on that dimension (except for basis 0).
"""

import os
# Suppress OpenMP deprecation warning (omp_set_nested)
os.environ.setdefault('KMP_WARNINGS', '0')

import numba
import numpy as np


@numba.jit(nopython=True, parallel=True, cache=True)
def _kernel_activations_numba(inputs, centers, widths, asymmetric_kernels):
    """
    Compute unnormalized kernel activations using numba.

    Parameters
    ----------
    inputs : ndarray of shape (n_samples, n_dims)
    centers : ndarray of shape (n_basis, n_dims)
    widths : ndarray of shape (n_basis, n_dims)
    asymmetric_kernels : bool

    Returns
    -------
    activations : ndarray of shape (n_samples, n_basis)
    """
    n_samples, n_dims = inputs.shape
    n_basis = centers.shape[0]
    activations = np.ones((n_samples, n_basis))

    for i in numba.prange(n_samples):
        for b in range(n_basis):
            for d in range(n_dims):
                x = inputs[i, d]
                c = centers[b, d]
                w = widths[b, d]
                if asymmetric_kernels and x < c and b > 0:
                    w = widths[b - 1, d]
                activations[i, b] *= np.exp(-0.5 * (x - c) ** 2 / (w * w))

    return activations


def _check_shapes(inputs, centers, widths):
    if centers.ndim != 2 or widths.ndim != 2 or inputs.ndim != 2:
        raise ValueError("inputs, centers and widths must be 2-D arrays")
    if centers.shape != widths.shape:
        raise ValueError(
            f"centers {centers.shape} and widths {widths.shape} must have the same shape"
        )
    if inputs.shape[1] != centers.shape[1]:
        raise ValueError(
            f"inputs have {inputs.shape[1]} dimensions, centers have {centers.shape[1]}"
        )


def kernel_activations(inputs, centers, widths, asymmetric_kernels=False):
    """
    Compute unnormalized Gaussian kernel activations.

    Parameters
    ----------
    inputs : ndarray of shape (n_samples, n_dims)
        Input samples.
    centers : ndarray of shape (n_basis, n_dims)
        Kernel centers.
    widths : ndarray of shape (n_basis, n_dims)
        Per-dimension kernel widths. Must be strictly positive.
    asymmetric_kernels : bool, default=False
        If True, samples below a center use the previous basis function's
        width on that dimension.

    Returns
    -------
    activations : ndarray of shape (n_samples, n_basis)
        Activation matrix, values in [0, 1].
    """
    inputs = np.asarray(inputs, dtype=np.float64)
    centers = np.asarray(centers, dtype=np.float64)
    widths = np.asarray(widths, dtype=np.float64)
    _check_shapes(inputs, centers, widths)

    return _kernel_activations_numba(
        np.ascontiguousarray(inputs),
        np.ascontiguousarray(centers),
        np.ascontiguousarray(widths),
        bool(asymmetric_kernels),
    )


def normalized_kernel_activations(inputs, centers, widths, asymmetric_kernels=False):
    """
    Compute kernel activations normalized to sum to one for each sample.

    With a single basis function the result is all ones: normalizing a
    kernel against itself gives 1 everywhere, and the regression reduces
    to ordinary least squares.

    If any sample has zero total activation, ``max(row_sums) / 100000`` is
    added to *every* row sum before dividing. This is a global floor, not a
    per-row fix, so rows that were not degenerate sum to slightly less than
    one in that case. If all row sums are zero the result is NaN.

    Parameters
    ----------
    inputs : ndarray of shape (n_samples, n_dims)
    centers : ndarray of shape (n_basis, n_dims)
    widths : ndarray of shape (n_basis, n_dims)
    asymmetric_kernels : bool, default=False

    Returns
    -------
    normalized : ndarray of shape (n_samples, n_basis)
    """
    inputs = np.asarray(inputs, dtype=np.float64)
    centers = np.asarray(centers, dtype=np.float64)
    widths = np.asarray(widths, dtype=np.float64)
    _check_shapes(inputs, centers, widths)

    n_samples = inputs.shape[0]
    n_basis = centers.shape[0]
    if n_basis == 1:
        return np.ones((n_samples, 1))

    activations = kernel_activations(inputs, centers, widths, asymmetric_kernels)
    sums = activations.sum(axis=1, keepdims=True)  # (n_samples, 1)

    if np.any(sums == 0):
        sums = sums + sums.max() / 100000.0

    return activations / sums

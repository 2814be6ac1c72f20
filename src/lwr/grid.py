"""
Evaluate an LWR model on a regular grid for inspection and plotting.

Only 1-D and 2-D input spaces are supported.
"""

import logging
import os

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

GRID_FILES = (
    'n_samples_per_dim',
    'inputs_grid',
    'lines',
    'weighted_lines',
    'activations',
    'activations_normalized',
)


def grid_inputs(min_values, max_values, n_samples_per_dim):
    """Regularly spaced inputs spanning [min, max] in each dimension.

    Parameters
    ----------
    min_values : array-like of shape (n_dims,)
    max_values : array-like of shape (n_dims,)
    n_samples_per_dim : array-like of int, shape (n_dims,)

    Returns
    -------
    inputs : ndarray of shape (prod(n_samples_per_dim), n_dims)
        For 2-D grids, row ``i * n2 + j`` holds ``(x1[i], x2[j])``.
    """
    min_values = np.atleast_1d(np.asarray(min_values, dtype=np.float64))
    max_values = np.atleast_1d(np.asarray(max_values, dtype=np.float64))
    n_samples_per_dim = np.atleast_1d(np.asarray(n_samples_per_dim, dtype=int))

    n_dims = min_values.size
    if max_values.size != n_dims or n_samples_per_dim.size != n_dims:
        raise ValueError(
            "min_values, max_values and n_samples_per_dim must have the same length"
        )
    if n_dims not in (1, 2):
        raise ValueError(f"Grids are only supported for 1 or 2 dimensions, got {n_dims}")

    axes = [
        np.linspace(lo, hi, n)
        for lo, hi, n in zip(min_values, max_values, n_samples_per_dim)
    ]
    if n_dims == 1:
        return axes[0].reshape(-1, 1)

    x1, x2 = np.meshgrid(axes[0], axes[1], indexing='ij')
    return np.column_stack([x1.ravel(), x2.ravel()])


def grid_data(model, min_values, max_values, n_samples_per_dim):
    """Evaluate every model output on a grid.

    Returns
    -------
    data : dict
        Keys from GRID_FILES, values are 2-D arrays.
    """
    inputs = grid_inputs(min_values, max_values, n_samples_per_dim)
    n_samples_per_dim = np.atleast_1d(np.asarray(n_samples_per_dim, dtype=int))
    return {
        'n_samples_per_dim': n_samples_per_dim.reshape(-1, 1),
        'inputs_grid': inputs,
        'lines': model.get_lines(inputs),
        'weighted_lines': model.locally_weighted_lines(inputs),
        'activations': model.kernel_activations(inputs),
        'activations_normalized': model.normalized_kernel_activations(inputs),
    }


def grid_frame(model, min_values, max_values, n_samples_per_dim):
    """Grid evaluation as a DataFrame, one row per grid point.

    Columns: x_<d>, line_<b>, activation_<b>, activation_normalized_<b>
    and weighted_lines.
    """
    data = grid_data(model, min_values, max_values, n_samples_per_dim)
    columns = {}
    for d in range(data['inputs_grid'].shape[1]):
        columns[f'x_{d}'] = data['inputs_grid'][:, d]
    for key, prefix in (('lines', 'line'),
                        ('activations', 'activation'),
                        ('activations_normalized', 'activation_normalized')):
        for b in range(data[key].shape[1]):
            columns[f'{prefix}_{b}'] = data[key][:, b]
    columns['weighted_lines'] = data['weighted_lines'][:, 0]
    return pd.DataFrame(columns)


def save_grid_data(model, min_values, max_values, n_samples_per_dim,
                   save_directory, overwrite=False):
    """Write grid evaluations to ``<save_directory>/<name>.txt``.

    Parameters
    ----------
    model : ModelParametersLWR
    min_values, max_values : array-like of shape (n_dims,)
    n_samples_per_dim : array-like of int, shape (n_dims,)
    save_directory : str or path-like
        Created if missing. An empty string writes nothing.
    overwrite : bool, default=False
        Replace existing files.

    Returns
    -------
    success : bool
        False if some file already existed and was not overwritten.
    """
    if not save_directory:
        return True

    data = grid_data(model, min_values, max_values, n_samples_per_dim)
    os.makedirs(save_directory, exist_ok=True)
    logger.info(f"Saving LWR grid data to {save_directory}")

    success = True
    for name in GRID_FILES:
        path = os.path.join(save_directory, f'{name}.txt')
        if os.path.exists(path) and not overwrite:
            logger.warning(f"Not overwriting existing file {path}")
            success = False
            continue
        fmt = '%d' if name == 'n_samples_per_dim' else '%.18e'
        np.savetxt(path, data[name], fmt=fmt)
    return success

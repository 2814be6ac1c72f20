"""
Flat parameter vector layout for LWR models.

The four parameter groups are concatenated in a fixed order, each flattened
column by column (all basis functions for dimension 0, then dimension 1, ...):

    [centers | widths | offsets | slopes]

External optimizers see the model only through this vector and an integer
mask selecting which groups they may change.
"""

import numpy as np

PARAMETER_GROUPS = ('centers', 'widths', 'offsets', 'slopes')

GROUP_IDS = {
    'centers': 1,
    'widths': 2,
    'offsets': 3,
    'slopes': 4,
}

# Normalized activations depend only on centers and widths.
INVALIDATES_ACTIVATION_CACHE = {
    'centers': True,
    'widths': True,
    'offsets': False,
    'slopes': False,
}


def selectable_parameters():
    """Names of the parameter groups that can be selected in a mask."""
    return set(PARAMETER_GROUPS)


def flatten_groups(groups):
    """Concatenate parameter matrices into one flat vector.

    Parameters
    ----------
    groups : dict
        Maps each name in PARAMETER_GROUPS to a 2-D ndarray.

    Returns
    -------
    values : ndarray of shape (n_values,)
    """
    return np.concatenate([
        np.asarray(groups[name], dtype=np.float64).ravel(order='F')
        for name in PARAMETER_GROUPS
    ])


def split_vector(values, shapes):
    """Cut a flat vector back into matrices of the given shapes.

    Parameters
    ----------
    values : ndarray of shape (n_values,)
    shapes : dict
        Maps each name in PARAMETER_GROUPS to a (rows, cols) tuple.

    Returns
    -------
    groups : dict
        Maps each group name to a new ndarray of its shape.
    """
    groups = {}
    offset = 0
    for name in PARAMETER_GROUPS:
        size = int(np.prod(shapes[name]))
        groups[name] = values[offset:offset + size].reshape(shapes[name], order='F')
        offset += size
    return groups


def parameter_vector_mask(shapes, selected):
    """Build the integer mask for a set of selected groups.

    Parameters
    ----------
    shapes : dict
        Maps each name in PARAMETER_GROUPS to a (rows, cols) tuple.
    selected : iterable of str
        Group names to select. Unknown names raise ValueError.

    Returns
    -------
    mask : ndarray of int, shape (n_values,)
        0 where the group is not selected, else the group's id from GROUP_IDS.
    """
    selected = set(selected)
    unknown = selected - set(PARAMETER_GROUPS)
    if unknown:
        raise ValueError(f"Unknown parameter groups: {sorted(unknown)}")

    parts = []
    for name in PARAMETER_GROUPS:
        size = int(np.prod(shapes[name]))
        fill = GROUP_IDS[name] if name in selected else 0
        parts.append(np.full(size, fill, dtype=int))
    return np.concatenate(parts)

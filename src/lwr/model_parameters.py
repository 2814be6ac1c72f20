"""
ModelParametersLWR: parameters and evaluation of a Locally Weighted Regression model.

The model is a set of local lines, one per Gaussian basis function, blended by
the normalized kernel activations:

    y(x) = sum_b phi_norm(x, b) * (slopes[b] . x + offsets[b])

Fitting happens elsewhere; this class receives finished centers, widths,
slopes and offsets, evaluates them, and exposes them to external optimizers
as one flat parameter vector.

Parameter shapes
----------------
- centers : (n_basis, n_dims)
- widths  : (n_basis, n_dims)
- slopes  : (n_basis, n_dims)
- offsets : (n_basis, 1)

Instances are not thread-safe: serialize evaluation and mutation per instance.
Clones share no state.
"""

import logging

import numpy as np
import pandas as pd
from sklearn.utils.validation import check_array

from .activation_cache import ActivationCache
from .activations import kernel_activations, normalized_kernel_activations
from .options import LWROptions
from .parameter_vector import (
    INVALIDATES_ACTIVATION_CACHE,
    PARAMETER_GROUPS,
    flatten_groups,
    parameter_vector_mask,
    selectable_parameters,
    split_vector,
)

logger = logging.getLogger(__name__)


class ModelParametersLWR:
    """
    Parameters of a Locally Weighted Regression function approximator.

    Parameters
    ----------
    centers : array-like of shape (n_basis, n_dims)
        Gaussian kernel centers.
    widths : array-like of shape (n_basis, n_dims)
        Gaussian kernel widths. Must be strictly positive.
    slopes : array-like of shape (n_basis, n_dims)
        Slopes of the local lines.
    offsets : array-like of shape (n_basis, 1) or (n_basis,)
        Offsets of the local lines.
    asymmetric_kernels : bool, default=False
        Use the previous basis function's width for samples below a center.
    lines_pivot_at_max_activation : bool, default=False
        Whether ``offsets`` are given relative to the kernel centers.
    slopes_as_angles : bool, default=False
        Expose slopes as angles in the flat parameter vector.
    caching : bool, default=True
        Cache normalized activations for the most recent input batch.

    Raises
    ------
    ValueError
        If the parameter shapes are inconsistent.

    Examples
    --------
    >>> import numpy as np
    >>> from lwr import ModelParametersLWR
    >>>
    >>> model = ModelParametersLWR(
    ...     centers=[[0.0], [10.0]], widths=[[2.0], [2.0]],
    ...     slopes=[[1.0], [1.0]], offsets=[0.0, 0.0])
    >>> model.locally_weighted_lines(np.array([[5.0]]))
    array([[5.]])
    """

    def __init__(
        self,
        centers,
        widths,
        slopes,
        offsets,
        asymmetric_kernels=False,
        lines_pivot_at_max_activation=False,
        slopes_as_angles=False,
        caching=True,
    ):
        self._centers = check_array(centers, dtype=np.float64, copy=True)
        self._widths = check_array(widths, dtype=np.float64, copy=True)
        self._slopes = check_array(slopes, dtype=np.float64, copy=True)
        offsets = check_array(offsets, dtype=np.float64, copy=True, ensure_2d=False)
        if offsets.ndim == 1:
            offsets = offsets.reshape(-1, 1)
        self._offsets = offsets

        n_basis, n_dims = self._centers.shape
        expected = {
            'widths': (n_basis, n_dims),
            'slopes': (n_basis, n_dims),
            'offsets': (n_basis, 1),
        }
        for name, shape in expected.items():
            actual = getattr(self, '_' + name).shape
            if actual != shape:
                raise ValueError(
                    f"{name} has shape {actual}, expected {shape} "
                    f"for centers of shape {self._centers.shape}"
                )

        self._asymmetric_kernels = bool(asymmetric_kernels)
        self._lines_pivot_at_max_activation = bool(lines_pivot_at_max_activation)
        self._slopes_as_angles = bool(slopes_as_angles)
        self.caching = bool(caching)

        self._cache = ActivationCache()
        self._all_values_vector_size = sum(
            getattr(self, '_' + name).size for name in PARAMETER_GROUPS
        )

    @classmethod
    def from_options(cls, centers, widths, slopes, offsets, options):
        """Construct from parameter matrices and an LWROptions instance."""
        return cls(centers, widths, slopes, offsets, **options.to_dict())

    def clone(self):
        """Return an independent copy with the same parameters and flags.

        The activation cache is not copied; the clone starts with an empty one.
        """
        return self.from_options(
            self._centers, self._widths, self._slopes, self._offsets, self.options
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def centers(self):
        return self._centers.copy()

    @property
    def widths(self):
        return self._widths.copy()

    @property
    def slopes(self):
        return self._slopes.copy()

    @property
    def offsets(self):
        return self._offsets.copy()

    @property
    def n_basis_functions(self):
        return self._centers.shape[0]

    @property
    def n_dims(self):
        return self._centers.shape[1]

    @property
    def asymmetric_kernels(self):
        return self._asymmetric_kernels

    @property
    def lines_pivot_at_max_activation(self):
        return self._lines_pivot_at_max_activation

    @property
    def slopes_as_angles(self):
        return self._slopes_as_angles

    @property
    def options(self):
        return LWROptions(
            asymmetric_kernels=self._asymmetric_kernels,
            lines_pivot_at_max_activation=self._lines_pivot_at_max_activation,
            slopes_as_angles=self._slopes_as_angles,
            caching=self.caching,
        )

    @property
    def cache(self):
        """The ActivationCache owned by this instance."""
        return self._cache

    def parameter_summary(self):
        """Parameters of each basis function as a table.

        Returns
        -------
        df : DataFrame
            One row per basis function. Columns: center_<d>, width_<d>,
            slope_<d> for each input dimension, and offset.
        """
        columns = {}
        for name, matrix in (('center', self._centers),
                             ('width', self._widths),
                             ('slope', self._slopes)):
            for d in range(self.n_dims):
                columns[f'{name}_{d}'] = matrix[:, d]
        columns['offset'] = self._offsets[:, 0]
        return pd.DataFrame(columns)

    def __repr__(self):
        return (
            f"ModelParametersLWR(n_basis_functions={self.n_basis_functions}, "
            f"n_dims={self.n_dims}, asymmetric_kernels={self._asymmetric_kernels}, "
            f"lines_pivot_at_max_activation={self._lines_pivot_at_max_activation}, "
            f"slopes_as_angles={self._slopes_as_angles}, caching={self.caching})"
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _check_inputs(self, inputs):
        """Convert inputs to a float (n_samples, n_dims) array.

        Empty batches and non-finite values are accepted, as in the
        module-level activation functions.
        """
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.ndim == 1 and self.n_dims == 1:
            inputs = inputs.reshape(-1, 1)
        inputs = check_array(
            inputs, dtype=np.float64, ensure_min_samples=0, ensure_all_finite=False
        )
        if inputs.shape[1] != self.n_dims:
            raise ValueError(
                f"inputs have {inputs.shape[1]} dimensions, model has {self.n_dims}"
            )
        return inputs

    def kernel_activations(self, inputs):
        """Unnormalized kernel activations, shape (n_samples, n_basis)."""
        inputs = self._check_inputs(inputs)
        return kernel_activations(
            inputs, self._centers, self._widths, self._asymmetric_kernels
        )

    def normalized_kernel_activations(self, inputs):
        """Normalized kernel activations, shape (n_samples, n_basis).

        When caching is enabled, a query with exactly the same inputs as the
        previous one returns the stored result without recomputing.
        """
        return self._normalized_kernel_activations(self._check_inputs(inputs))

    def _normalized_kernel_activations(self, inputs):
        if self.caching:
            cached = self._cache.lookup(inputs)
            if cached is not None:
                return cached

        activations = normalized_kernel_activations(
            inputs, self._centers, self._widths, self._asymmetric_kernels
        )

        if self.caching:
            self._cache.store(inputs, activations)
        return activations

    def clear_cache(self):
        self._cache.clear()

    def _slopes_dot_centers(self):
        """Per-line a.c, shape (n_basis,)."""
        return np.sum(self._slopes * self._centers, axis=1)

    def get_lines(self, inputs):
        """Value of each local line at each input, shape (n_samples, n_basis).

        Lines are evaluated as "y = ax + b"; with pivoting enabled the offsets
        are relative to the centers, so a.c is subtracted.
        """
        return self._get_lines(self._check_inputs(inputs))

    def _get_lines(self, inputs):
        lines = inputs @ self._slopes.T + self._offsets.T
        if self._lines_pivot_at_max_activation:
            lines = lines - self._slopes_dot_centers()[None, :]
        return lines

    def locally_weighted_lines(self, inputs):
        """Model output: lines blended by normalized activations, shape (n_samples, 1)."""
        inputs = self._check_inputs(inputs)
        lines = self._get_lines(inputs)
        activations = self._normalized_kernel_activations(inputs)
        return np.sum(lines * activations, axis=1, keepdims=True)

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def set_lines_pivot_at_max_activation(self, lines_pivot_at_max_activation):
        """Switch the offset representation, rewriting offsets in place.

        "y = ax + b" becomes "y = a(x-c) + (b + ac)" and vice versa, so the
        lines themselves do not change. Centers and widths are untouched,
        so the activation cache stays valid.
        """
        lines_pivot_at_max_activation = bool(lines_pivot_at_max_activation)
        if lines_pivot_at_max_activation == self._lines_pivot_at_max_activation:
            return

        ac = self._slopes_dot_centers()[:, None]
        if lines_pivot_at_max_activation:
            self._offsets += ac
        else:
            self._offsets -= ac

        logger.debug(f"lines_pivot_at_max_activation set to {lines_pivot_at_max_activation}")
        self._lines_pivot_at_max_activation = lines_pivot_at_max_activation

    def set_slopes_as_angles(self, slopes_as_angles):
        """Expose slopes as atan2(slope, 1) in the flat parameter vector."""
        slopes_as_angles = bool(slopes_as_angles)
        if slopes_as_angles != self._slopes_as_angles:
            logger.info(f"slopes_as_angles set to {slopes_as_angles}")
        self._slopes_as_angles = slopes_as_angles

    def set_parameter_vector_modifier(self, modifier, new_value):
        """Set a representation modifier by name.

        Parameters
        ----------
        modifier : str
            'lines_pivot_at_max_activation' or 'slopes_as_angles'.
        new_value : bool
        """
        if modifier == 'lines_pivot_at_max_activation':
            self.set_lines_pivot_at_max_activation(new_value)
        elif modifier == 'slopes_as_angles':
            self.set_slopes_as_angles(new_value)
        else:
            raise ValueError(f"Unknown parameter vector modifier: {modifier}")

    # ------------------------------------------------------------------
    # Flat parameter vector
    # ------------------------------------------------------------------

    def _shapes(self):
        return {name: getattr(self, '_' + name).shape for name in PARAMETER_GROUPS}

    def get_selectable_parameters(self):
        return selectable_parameters()

    def get_parameter_vector_all_size(self):
        """Total number of scalars: 3 * n_basis * n_dims + n_basis."""
        return self._all_values_vector_size

    def get_parameter_vector_all(self):
        """All parameters as one flat vector.

        Returns
        -------
        values : ndarray of shape (n_values,)
            centers, widths, offsets, slopes; each flattened column by column.
        """
        slopes = self._slopes
        if self._slopes_as_angles:
            slopes = np.arctan2(slopes, 1.0)
        return flatten_groups({
            'centers': self._centers,
            'widths': self._widths,
            'offsets': self._offsets,
            'slopes': slopes,
        })

    def set_parameter_vector_all(self, values):
        """Overwrite all parameters from a flat vector.

        Changing centers or widths clears the activation cache; changing
        offsets or slopes does not.

        Parameters
        ----------
        values : array-like of shape (n_values,)
            Same layout as get_parameter_vector_all().

        Returns
        -------
        success : bool
            False if ``values`` has the wrong size, in which case nothing is
            modified.
        """
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.size != self._all_values_vector_size:
            logger.error(
                f"Parameter vector has wrong size: got {values.size}, "
                f"expected {self._all_values_vector_size}"
            )
            return False

        groups = split_vector(values, self._shapes())
        if self._slopes_as_angles:
            groups['slopes'] = np.tan(groups['slopes'])

        for name in PARAMETER_GROUPS:
            current = getattr(self, '_' + name)
            if INVALIDATES_ACTIVATION_CACHE[name] and not np.array_equal(current, groups[name]):
                self.clear_cache()
            current[...] = groups[name]

        return True

    def get_parameter_vector_mask(self, selected_values_labels):
        """Integer mask over the flat vector for the selected groups.

        Parameters
        ----------
        selected_values_labels : iterable of str
            Subset of get_selectable_parameters().

        Returns
        -------
        mask : ndarray of int, shape (n_values,)
            centers=1, widths=2, offsets=3, slopes=4; 0 where not selected.
        """
        return parameter_vector_mask(self._shapes(), selected_values_labels)

"""
LWR - Locally Weighted Regression model parameters

Local lines blended by normalized Gaussian kernel activations, with a flat
parameter vector interface for black-box optimizers.
"""

from .model_parameters import ModelParametersLWR
from .activations import kernel_activations, normalized_kernel_activations
from .activation_cache import ActivationCache
from .options import LWROptions
from .parameter_vector import PARAMETER_GROUPS, GROUP_IDS, INVALIDATES_ACTIVATION_CACHE
from .grid import grid_inputs, grid_data, grid_frame, save_grid_data

__all__ = [
    'ModelParametersLWR',
    'kernel_activations',
    'normalized_kernel_activations',
    'ActivationCache',
    'LWROptions',
    'PARAMETER_GROUPS',
    'GROUP_IDS',
    'INVALIDATES_ACTIVATION_CACHE',
    'grid_inputs',
    'grid_data',
    'grid_frame',
    'save_grid_data',
]

__version__ = '0.1.0'

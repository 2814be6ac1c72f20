"""
Behaviour flags for LWR model parameters.
"""

from dataclasses import dataclass, asdict


@dataclass
class LWROptions:
    """Flags controlling how an LWR model evaluates and exposes its parameters.

    Attributes
    ----------
    asymmetric_kernels : bool
        Samples below a center use the previous basis function's width.
    lines_pivot_at_max_activation : bool
        Offsets are the line values at the kernel centers ("y = a(x-c) + b")
        rather than at x = 0 ("y = ax + b").
    slopes_as_angles : bool
        Slopes appear in the flat parameter vector as atan2(slope, 1).
    caching : bool
        Memoize normalized activations for the most recent input batch.
    """
    asymmetric_kernels: bool = False
    lines_pivot_at_max_activation: bool = False
    slopes_as_angles: bool = False
    caching: bool = True

    def to_dict(self) -> dict:
        """Return as dict of keyword arguments.

        Returns
        -------
        dict
            Suitable for ModelParametersLWR(centers, widths, slopes, offsets, **options.to_dict())
        """
        return asdict(self)

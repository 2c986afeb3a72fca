"""Define-by-run automatic differentiation with higher-order gradients on numpy arrays."""

__version__ = "0.1.0"
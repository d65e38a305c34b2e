"""
Backend selection and management.

A single double-precision CPU provider supplies the matrix products and
symmetric solves used by the regression engine.
"""

from .base import BackendBase
from .cpu_fp64_backend import CPUBackendFP64
from ..exceptions import ConfigurationError


def get_backend(backend: str = 'auto') -> BackendBase:
    """
    Get computational backend.

    Parameters
    ----------
    backend : str
        Backend selection:
        - 'auto': Best available provider (currently always CPU)
        - 'cpu': CPU with NumPy/SciPy (FP64)

    Returns
    -------
    BackendBase
        Backend instance

    Examples
    --------
    >>> backend = get_backend('cpu')
    >>> A, b = backend.gram(X, y)
    >>> beta = backend.solve_normal_equations(A, b)
    """
    if isinstance(backend, BackendBase):
        return backend

    if backend in ('auto', 'cpu'):
        return CPUBackendFP64()

    raise ConfigurationError(
        f"Unknown backend: '{backend}'\n"
        f"Valid options: 'auto', 'cpu'"
    )


def list_available_backends() -> list:
    """List names of available backends."""
    return ['cpu']


def print_backend_info():
    """Print detailed backend information (diagnostic)."""
    print("PyStepReg Backend Status")
    print("=" * 50)
    print(f"\nAvailable Backends:")
    print("  CPU (FP64):          ✓ - Cholesky on normal equations")

    print(f"\nRecommended Backend:")
    print(f"  {get_backend('auto').name}")


__all__ = [
    'get_backend',
    'list_available_backends',
    'print_backend_info',
    'BackendBase',
    'CPUBackendFP64',
]


if __name__ == "__main__":
    print_backend_info()

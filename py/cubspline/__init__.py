from ._version import version as __version__
from .spline import (Spline, SplineType, SplineError,
                     UnsupportedSplineTypeError, IntersectionError)
from .monotonic import Monotonicity

__all__ = [
    'Spline', 'SplineType', 'SplineError', 'UnsupportedSplineTypeError',
    'IntersectionError', 'Monotonicity'
]

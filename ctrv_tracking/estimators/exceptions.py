"""
Exceptions raised by the CTRV filter.

Numerical failures are unrecoverable for the step that hit them. The filter
commits nothing from that step, marks itself diverged, and refuses further
measurements until reset().
"""


class FilterError(RuntimeError):
    """Base class for filter failures."""


class CovarianceDegeneracyError(FilterError):
    """A covariance could not be factorized or inverted.

    Raised when the augmented state covariance is not positive definite
    (Cholesky fails), when an innovation covariance is singular, or when an
    update produces non-finite numbers.
    """


class FilterDivergedError(FilterError):
    """The filter hit a numerical failure earlier and must be reset."""


class MeasurementOrderError(ValueError):
    """A measurement timestamp precedes the filter's reference time."""

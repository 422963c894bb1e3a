"""
Exception classes raised by pymizer.

Configuration problems are reported before a projection touches any
state; numerical problems abort a running projection.
"""


class MizerError(Exception):
    """Base exception for size-spectrum model errors."""

    pass


class ConfigurationError(MizerError, ValueError):
    """Raised for malformed effort specifications or time settings."""

    pass


class ParamsError(MizerError, ValueError):
    """Raised when a MizerParams object is missing fields or is inconsistent."""

    pass


class NumericalError(MizerError, ArithmeticError):
    """Raised when a projection step produces non-finite values."""

    def __init__(self, message: str, step: int, time: float):
        super().__init__(message)
        self.step = step
        self.time = time

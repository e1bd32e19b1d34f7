"""Custom exception classes for RiemCG optimizers.

Failing to find a descent step is not an error: it ends the optimization
normally. These exceptions cover misconfiguration and misuse only.
"""

from typing import Any


class OptimizerError(Exception):
    """Base exception class for optimizer errors."""

    pass


class ParameterValidationError(OptimizerError, ValueError):
    """Exception raised when an optimizer parameter is invalid."""

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        received_value: Any = None,
    ):
        """Initialize ParameterValidationError.

        Args:
            message: Error description.
            parameter_name: Name of the invalid parameter.
            received_value: The actual received value.
        """
        super().__init__(message)
        self.parameter_name = parameter_name
        self.received_value = received_value


class ReentrantOptimizationError(OptimizerError, RuntimeError):
    """Exception raised when ``optimize`` is re-entered on a running optimizer instance."""

    pass

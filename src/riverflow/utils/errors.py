"""
Error types for RiverFlow pipe operations.
"""

from typing import Optional


class RiverFlowError(Exception):
    """Base exception for all RiverFlow errors."""

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        self.message = message
        self.operation = operation
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.operation:
            return f"[{self.operation}] {self.message}"
        return self.message


class InvalidArgument(RiverFlowError, ValueError):
    """
    Raised when an operation receives arguments of the wrong shape.

    This error is raised when:
    - A window or chunk size is not positive
    - A call frame is ambiguous (the first argument is both iterable and callable)
    - Arguments do not fit either the direct or the curried signature
    - A classifier, grouper or keyer returns a value that cannot be a map key

    Attributes:
        operation: Name of the operation that rejected its arguments
        constraint: Human readable description of the violated constraint
    """

    def __init__(self, operation: str, constraint: str) -> None:
        self.constraint = constraint
        super().__init__(constraint, operation)

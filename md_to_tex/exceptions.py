"""Package-specific exception types."""

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for conversion-related errors.

    Represents errors encountered while converting markdown content to LaTeX.
    """


class LineTooLongError(ConversionError):
    """Raised when a line exceeds the configured maximum length.

    Args:
        line_number: One-based index of the offending line.
        max_line_length: Maximum allowed line length in characters.
    """

    def __init__(self, line_number: int, max_line_length: int):
        self.line_number = line_number
        self.max_line_length = max_line_length
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Line {self.line_number} exceeds maximum allowed length "
            f"of {self.max_line_length} characters"
        )


class UnknownStateError(ConversionError):
    """Raised when the converter reaches a state it has no transition for.

    Args:
        state: The state that could not be dispatched.
    """

    def __init__(self, state: object):
        self.state = state
        super().__init__(f"Error, unknown state {state}")

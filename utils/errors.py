"""
Error definitions and handling for the G-code preview pipeline.
"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, List


class ErrorType(Enum):
    SYNTAX = "syntax"
    SEMANTIC = "semantic"


class ErrorSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class ParseErrorReason(Enum):
    """Why the lexer rejected the input."""
    EXPECTED_LETTER = "Expected a valid G-code letter"
    EXPECTED_NUMBER = "Expected a valid G-code number"
    EXPECTED_END_OF_COMMENT = "Expected end of comment"


class InterpreterErrorReason(Enum):
    """Why the interpreter rejected a parsed program."""
    UNKNOWN_COMMAND = "Unknown command"
    BAD_ARC = "The radius of the arc is not constant"


class GCodeError(Exception):
    """Base class for all errors raised while processing G-code."""

    error_type: ErrorType = ErrorType.SYNTAX

    def __init__(self, reason: Enum, line_number: int, detail: Optional[str] = None):
        self.reason = reason
        self.line_number = line_number
        self.detail = detail
        super().__init__(str(self))

    @property
    def message(self) -> str:
        if self.detail:
            return f"{self.reason.value}: {self.detail}"
        return self.reason.value

    def __str__(self):
        return f"Line {self.line_number}: {self.message}"


class ParseError(GCodeError):
    """Raised by the lexer on the first syntax error."""

    error_type = ErrorType.SYNTAX

    def __init__(self, reason: ParseErrorReason, line_number: int, column: int = 0):
        self.column = column
        super().__init__(reason, line_number)


class InterpreterError(GCodeError):
    """Raised by the interpreter on the first semantic error."""

    error_type = ErrorType.SEMANTIC

    def __init__(self, reason: InterpreterErrorReason, line_number: int,
                 detail: Optional[str] = None):
        super().__init__(reason, line_number, detail)


@dataclass
class ErrorRecord:
    """A reported error with position information, kept for editor lookups."""
    line_number: int
    column: int
    message: str
    error_type: ErrorType
    severity: ErrorSeverity = ErrorSeverity.FATAL

    def __str__(self):
        return f"Line {self.line_number}: {self.message}"

    @classmethod
    def from_exception(cls, error: GCodeError) -> 'ErrorRecord':
        return cls(
            line_number=error.line_number,
            column=getattr(error, 'column', 0),
            message=error.message,
            error_type=error.error_type,
        )


class ErrorCollector:
    """Collects the errors reported by the last processing run."""

    def __init__(self):
        self.errors: List[ErrorRecord] = []

    def add_error(self, error: GCodeError):
        """Record an error raised by one of the pipeline stages."""
        self.errors.append(ErrorRecord.from_exception(error))

    def get_errors_for_line(self, line_number: int) -> List[ErrorRecord]:
        """Get all errors for a specific line."""
        return [error for error in self.errors if error.line_number == line_number]

    def has_fatal_errors(self) -> bool:
        """Check if there are any fatal errors."""
        return any(error.severity == ErrorSeverity.FATAL for error in self.errors)

    def has_errors(self) -> bool:
        """Check if there are any errors (excluding warnings)."""
        return any(error.severity in [ErrorSeverity.ERROR, ErrorSeverity.FATAL]
                   for error in self.errors)

    def clear(self):
        """Clear all errors."""
        self.errors.clear()

    def get_all_errors(self) -> List[ErrorRecord]:
        """Get all errors sorted by line number."""
        return sorted(self.errors, key=lambda e: (e.line_number, e.column))

"""interpol exceptions

Error taxonomy for scanning and rendering templates.
"""

from __future__ import annotations


class TemplateError(Exception):
    """Base exception for all interpol errors.

    `span` and `code` identify the expression block the error came from once
    the pipeline has tagged it.
    """

    span: tuple[int, int] | None = None
    code: str | None = None

    def __str__(self) -> str:
        message = super().__str__()
        if self.span is not None:
            return f"{message} (at {self.span[0]}:{self.span[1]})"
        return message


class UnmatchedDelimiterError(TemplateError):
    """Raised when a marker has no matching counterpart."""

    def __init__(self, position: int, marker: str, message: str | None = None):
        self.position = position
        self.marker = marker
        super().__init__(
            message or f"Unmatched delimiter {marker!r} at position {position}"
        )


class NestingError(TemplateError):
    """Raised when a template needs nested blocks the scanner doesn't support."""

    def __init__(self, position: int, marker: str):
        self.position = position
        self.marker = marker
        super().__init__(
            f"Nested {marker!r} at position {position}; "
            f"escape it as {marker * 2!r} or enable nested scanning"
        )


class EvaluationError(TemplateError):
    """Raised by an evaluator when code fails to parse or run."""

    def __init__(self, code: str, cause: BaseException):
        self.code = code
        self.cause = cause
        super().__init__(f"Failed to evaluate {code!r}: {cause}")


class TransformerError(TemplateError):
    """Raised by a transformer for failures outside evaluation."""

    pass


class RecycleError(TemplateError):
    """Raised when expression vectors can't be recycled to a common length."""

    def __init__(self, lengths: list[int]):
        self.lengths = lengths
        super().__init__(
            f"Cannot recycle vectors of lengths {lengths}; "
            "only length-1 vectors are recycled in strict mode"
        )


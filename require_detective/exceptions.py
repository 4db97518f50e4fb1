"""Exception hierarchy for require-detective.

The visitor itself is total over any well-formed tree, so the only error
that reaches a caller of ``find`` is a parse failure raised by the syntax
provider.
"""


class DetectiveError(Exception):
    """Base exception for all require-detective errors.

    Callers that only need to know that detection failed can catch this
    class instead of the concrete subclasses.
    """
    pass


class SourceSyntaxError(DetectiveError):
    """Source text could not be parsed as JavaScript.

    Attributes:
        message: Human readable description of the problem.
        line: 1-based line of the first offending token, if known.
        column: 0-based column of the first offending token, if known.
    """

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.message = message
        self.line = line
        self.column = column
        if line is not None and column is not None:
            super().__init__(f"{message} ({line}:{column})")
        else:
            super().__init__(message)

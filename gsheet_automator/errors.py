"""
Exception types shared by the batch engine and the Google API helpers.
"""

from __future__ import annotations


class ShapeError(ValueError):
    """The sheet range does not have the shape a batch run needs."""


class InsufficientHeadersError(ShapeError):
    def __init__(self, headers):
        self.headers = list(headers)
        super().__init__(
            "Header row must contain at least two unique headers. "
            f"Invalid headers: {self.headers!r}"
        )


class MissingColumnError(ShapeError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Missing column header: '{column}'")


class TemplateNotFoundError(LookupError):
    def __init__(self, subject: str):
        self.subject = subject
        super().__init__(f"No Gmail draft found with subject: '{subject}'")


class ConfigError(ValueError):
    """Invalid configuration detected before a run starts."""


class DuplicateColumnError(ShapeError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column header appears more than once: '{column}'")

"""
Custom exceptions for WidgetSmith.
"""


class WidgetSmithError(Exception):
    """Base exception for all WidgetSmith errors."""
    pass


class ConfigError(WidgetSmithError):
    """Raised when the CLI/config combination cannot be used."""
    pass


class SourceParseError(WidgetSmithError):
    """Raised when source code cannot be parsed."""
    def __init__(self, file_path: str, line_number: int, message: str):
        self.file_path = file_path
        self.line_number = line_number
        self.message = message
        super().__init__(f"Syntax error in {file_path} at line {line_number}: {message}")


class GenerationClientError(WidgetSmithError):
    """Raised when the external generation service cannot produce a response."""
    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

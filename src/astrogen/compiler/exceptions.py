"""Compiler exceptions."""

from typing import Optional


class AstrogenError(Exception):
    """Base class for errors raised by the astrogen compiler."""

    def __init__(self, message: str, file_path: str = "") -> None:
        self.message = message
        self.file_path = file_path
        super().__init__(message)

    def __str__(self) -> str:
        if self.file_path:
            return f"{self.file_path}: {self.message}"
        return self.message


class IRValidationError(AstrogenError):
    """Raised when a component document does not have the expected shape."""

    def __init__(self, message: str, path: str = "$", file_path: str = "") -> None:
        self.path = path
        super().__init__(f"{message} (at {path})", file_path=file_path)


class InvalidOptionError(AstrogenError):
    """Raised when compile options contain an unknown key or bad value."""


class ExpressionSyntaxError(AstrogenError):
    """Raised when embedded expression code cannot be parsed."""

    def __init__(self, message: str, code: str, offset: Optional[int] = None) -> None:
        self.code = code
        self.offset = offset
        if offset is not None:
            message = f"{message} at offset {offset}"
        super().__init__(message)


class StyleObjectParseError(AstrogenError):
    """Raised when a style object is not a literal we can turn into CSS."""

    def __init__(self, message: str, code: str) -> None:
        self.code = code
        super().__init__(message)

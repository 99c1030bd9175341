"""Exceptions raised by pdfimage.

Every failure of an external process carries the captured output streams and
the exit code so callers can report what the tool said.
"""

from __future__ import annotations

from pathlib import Path


class PDFImageError(Exception):
    """Base exception for all pdfimage errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown pdfimage error occurred."


class InvalidInputError(PDFImageError):
    """Raised when a string would break out of a single shell argument."""

    @property
    def default_message(self) -> str:
        return "Command break input string, invalid characters detected"


class CommandError(PDFImageError):
    """An external command exited non-zero or could not be started."""

    def __init__(
        self,
        message: str = "",
        *,
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
        error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.error = error

    @property
    def default_message(self) -> str:
        return "External command failed."


class InfoQueryError(CommandError):
    @property
    def default_message(self) -> str:
        return "Failed to get PDF's information"


class PageConversionError(CommandError):
    def __init__(self, message: str = "", *, page: int, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.page = page

    @property
    def default_message(self) -> str:
        return "Failed to convert page to image"


class CombineError(CommandError):
    @property
    def default_message(self) -> str:
        return "Failed to combine images"


class MissingFieldError(PDFImageError):
    """The info output has no entry for a required key."""

    def __init__(self, field: str) -> None:
        super().__init__(f"PDF information has no {field!r} field")
        self.field = field


class PageCountParseError(PDFImageError):
    """The page count reported by the info tool is not an integer."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Cannot parse page count {value!r}")
        self.value = value


class SourceMissingError(PDFImageError):
    """A cached page image exists but the source document is gone."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"Failed to stat PDF file: {path}")
        self.path = Path(path)

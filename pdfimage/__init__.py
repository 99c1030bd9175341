"""Convert PDF pages to images through ImageMagick or GraphicsMagick."""

from .config import ConversionJob, Settings, load_settings
from .converter import PDFImage
from .errors import (
    CombineError,
    CommandError,
    InfoQueryError,
    InvalidInputError,
    MissingFieldError,
    PageConversionError,
    PageCountParseError,
    PDFImageError,
    SourceMissingError,
)
from .security import validate_command_break

__all__ = [
    "__version__",
    "CombineError",
    "CommandError",
    "ConversionJob",
    "InfoQueryError",
    "InvalidInputError",
    "MissingFieldError",
    "PDFImage",
    "PDFImageError",
    "PageConversionError",
    "PageCountParseError",
    "Settings",
    "SourceMissingError",
    "load_settings",
    "validate_command_break",
]

__version__ = "0.1.0"

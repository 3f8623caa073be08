# cwe_dictgen/exceptions.py

from typing import Any, Dict, Optional


class DictGenError(Exception):
    """
    Base exception for all CWE dictionary generator errors.

    Attributes:
        message: Human-readable description of the failure
        code: Optional machine-readable error code
        details: Optional dictionary with additional context
        stage: Pipeline stage the error belongs to
    """
    stage = "generate"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ValidationError(DictGenError):
    """Raised when command-line arguments or run parameters are invalid."""
    stage = "configure"


class FileSystemError(DictGenError):
    """Raised when reading or writing local files fails."""
    stage = "deliver"


# --- Fetch stage ---
class RetrievalError(DictGenError):
    """Raised for non-200 responses, transport failures and corrupt archives."""
    stage = "fetch"


class MemberNotFoundError(DictGenError):
    """Raised when the downloaded archive lacks the expected catalog file."""
    stage = "fetch"


# --- Extract stage ---
class CatalogError(DictGenError):
    """Base class for errors found while extracting catalog records."""
    stage = "extract"


class MalformedDocumentError(CatalogError):
    """Raised when the catalog is not well-formed XML or uses a forbidden construct."""


class MissingAttributeError(CatalogError):
    """Raised when a catalog record lacks its ID or Name attribute."""


class InvalidIdentifierError(CatalogError):
    """Raised when a catalog record ID is not a usable non-negative integer."""


# --- Render stage ---
class RenderError(DictGenError):
    """Raised when the output template cannot be evaluated."""
    stage = "render"

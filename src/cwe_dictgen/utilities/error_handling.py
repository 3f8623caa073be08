"""
Error handling utilities for the CWE dictionary generator.

Error reports are printed to STDERR so that STDOUT only ever carries
generated source.
"""

import sys
import logging
import argparse
import functools
from typing import Callable

from ..exceptions import (
    DictGenError,
    ValidationError,
    FileSystemError,
    RetrievalError,
    MemberNotFoundError,
    MalformedDocumentError,
    MissingAttributeError,
    InvalidIdentifierError,
    CatalogError,
    RenderError,
)

logger = logging.getLogger("cwe-dictgen")


def _err(message: str = "") -> None:
    print(message, file=sys.stderr)


def format_and_print_error(error: Exception, handler_name: str, params: argparse.Namespace):
    """
    Formats and prints a standardized error message naming the failed stage.

    Args:
        error: The exception that occurred
        handler_name: Name of the handler where the error occurred
        params: Command line parameters
    """
    version = getattr(params, 'version', '<not specified>')
    error_message = getattr(error, 'message', str(error))
    error_code = getattr(error, 'code', None)
    error_details = getattr(error, 'details', {})
    stage = getattr(error, 'stage', 'generate')

    if isinstance(error, RetrievalError):
        _err(f"\n❌ Catalog retrieval failed")
        _err(f"   {error_message}")
        _err(f"\n💡 Please check:")
        _err(f"   • CWE version '{version}' exists (see https://cwe.mitre.org/data/archive.html)")
        _err(f"   • The catalog location is reachable: {getattr(params, 'base_url', '<not specified>')}")
        if error_code == "timeout":
            _err(f"   • Consider increasing --timeout (current: {getattr(params, 'timeout', 'default')})")

    elif isinstance(error, MemberNotFoundError):
        _err(f"\n❌ Catalog archive is incomplete")
        _err(f"   {error_message}")
        _err(f"\n💡 The archive for version '{version}' does not contain the expected catalog file")

    elif isinstance(error, MalformedDocumentError):
        _err(f"\n❌ Catalog document could not be parsed")
        _err(f"   {error_message}")
        _err(f"\n💡 DTDs, entity declarations and external references are not accepted")

    elif isinstance(error, (MissingAttributeError, InvalidIdentifierError)):
        _err(f"\n❌ Catalog contains an invalid record")
        _err(f"   {error_message}")

    elif isinstance(error, CatalogError):
        _err(f"\n❌ Catalog extraction failed")
        _err(f"   {error_message}")

    elif isinstance(error, RenderError):
        _err(f"\n❌ Source rendering failed")
        _err(f"   {error_message}")
        _err(f"\n💡 The output template does not match the render context")

    elif isinstance(error, FileSystemError):
        _err(f"\n❌ File system error")
        _err(f"   {error_message}")
        _err(f"\n💡 Please check:")
        _err(f"   • File permissions are correct")
        if getattr(params, 'output', None):
            _err(f"   • Output path specified: {params.output}")

    elif isinstance(error, ValidationError):
        _err(f"\n❌ Invalid input or configuration")
        _err(f"   {error_message}")
        _err(f"\n💡 Please check your command-line arguments")

    else:
        _err(f"\n❌ Error during '{stage}' stage: {error_message}")

    if error_code and not isinstance(error, RetrievalError):
        _err(f"\nError code: {error_code}")

    if getattr(params, 'log', 'INFO') == 'DEBUG' and error_details:
        _err("\nDetailed error information:")
        for key, value in error_details.items():
            _err(f"  • {key}: {value}")


def handler_error_wrapper(handler_func: Callable) -> Callable:
    """
    A decorator that wraps handler functions with standardized error handling.

    Expected errors are reported through format_and_print_error and
    re-raised unchanged. Anything else is logged with its traceback and
    re-raised as a DictGenError so main() can map it to an exit code.
    """
    @functools.wraps(handler_func)
    def wrapper(catalog_api, params):
        try:
            logger.debug(f"Starting {handler_func.__name__} for version '{getattr(params, 'version', 'unknown')}'")
            return handler_func(catalog_api, params)

        except DictGenError as e:
            logger.debug(f"Expected error in {handler_func.__name__}: {type(e).__name__}: {e.message}")
            format_and_print_error(e, handler_func.__name__, params)
            raise

        except Exception as e:
            logger.error(f"Unexpected error in {handler_func.__name__}: {e}", exc_info=True)
            cli_error = DictGenError(
                f"Failed to generate CWE dictionary: {str(e)}",
                details={"error": str(e), "handler": handler_func.__name__}
            )
            format_and_print_error(cli_error, handler_func.__name__, params)
            raise cli_error from e

    return wrapper

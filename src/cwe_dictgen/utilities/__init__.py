"""
Utilities package for the CWE dictionary generator.

This package contains catalog extraction, source rendering, output delivery
and error handling.
"""

from .error_handling import format_and_print_error, handler_error_wrapper
from .catalog_parser import parse_catalog, CATALOG_QUERIES
from .source_renderer import RenderContext, render_dictionary, json_escape, DICTIONARY_TEMPLATE
from .output import deliver_output, format_duration

__all__ = [
    # Error handling
    'format_and_print_error',
    'handler_error_wrapper',
    # Catalog extraction
    'parse_catalog',
    'CATALOG_QUERIES',
    # Source rendering
    'RenderContext',
    'render_dictionary',
    'json_escape',
    'DICTIONARY_TEMPLATE',
    # Output
    'deliver_output',
    'format_duration',
]

# cwe_dictgen/__init__.py
"""
CWE dictionary generator package
"""

from .api import CatalogAPI
from .utilities.catalog_parser import parse_catalog
from .utilities.source_renderer import RenderContext, render_dictionary

__version__ = "1.0.0"

__all__ = ['CatalogAPI', 'parse_catalog', 'RenderContext', 'render_dictionary']

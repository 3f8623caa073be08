from .catalog_api import CatalogAPI, DEFAULT_BASE_URL, DEFAULT_TIMEOUT

__all__ = ['CatalogAPI', 'DEFAULT_BASE_URL', 'DEFAULT_TIMEOUT']

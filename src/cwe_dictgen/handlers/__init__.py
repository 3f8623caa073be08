# cwe_dictgen/handlers/__init__.py

import logging

# Common logger for all handlers
logger = logging.getLogger("cwe-dictgen")

from .generate import handle_generate

__all__ = [
    'handle_generate',
]

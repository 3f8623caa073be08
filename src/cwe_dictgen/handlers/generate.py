# cwe_dictgen/handlers/generate.py

import sys
import argparse

from ..api import CatalogAPI
from ..utilities.error_handling import handler_error_wrapper
from ..utilities.catalog_parser import parse_catalog
from ..utilities.source_renderer import RenderContext, render_dictionary
from ..utilities.output import deliver_output

from . import logger


@handler_error_wrapper
def handle_generate(catalog_api: CatalogAPI, params: argparse.Namespace) -> bool:
    """
    Handler for the generate command.
    Fetches the CWE catalog, extracts its definitions and writes the
    CweDictionary source. Every stage must complete before the next begins;
    any failure aborts the run before output is written.

    Args:
        catalog_api: Client used to download the catalog archive
        params: Command line parameters

    Returns:
        True if the dictionary was generated and delivered

    Raises:
        Various DictGenError subclasses, one per failing stage
    """
    print(f"\n--- Generating CWE dictionary v{params.version} ---", file=sys.stderr)

    document = catalog_api.fetch_catalog(params.version)

    definitions = parse_catalog(document)
    if not definitions:
        logger.warning("Catalog contained no categories, weaknesses or views")

    context = RenderContext.create(
        definitions,
        package_name=params.package_name,
        version=params.version,
        jakarta=params.jakarta,
    )
    output = render_dictionary(context)

    deliver_output(output, params.output)
    return True

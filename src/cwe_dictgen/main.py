import sys
import time
import logging

from .api import CatalogAPI
from .cli import parse_cmdline_args
from .handlers import handle_generate
from .utilities.output import format_duration
from .exceptions import (
    DictGenError,
    ValidationError,
    FileSystemError,
    RetrievalError,
    MemberNotFoundError,
    CatalogError,
    RenderError,
)


def _configure_logging(params) -> logging.Logger:
    log_level = getattr(logging, params.log.upper(), logging.INFO)

    # Console output goes to STDERR, STDOUT is reserved for the generated source
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    console_handler.setLevel(log_level)

    handlers = [console_handler]
    if params.log_file:
        file_handler = logging.FileHandler(params.log_file, mode='w')
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    return logging.getLogger("cwe-dictgen")


def main(argv=None) -> int:
    """
    Main function to parse arguments, set up logging, and run the
    fetch, extract, render and deliver pipeline.
    Returns an exit code (0 for success, non-zero for failure).
    """
    start_time = time.monotonic()
    exit_code = 1 # Default to failure
    logger = None

    try:
        params = parse_cmdline_args(argv)
        logger = _configure_logging(params)

        # Print Configuration for this Run
        print("--- CWE Dictionary Generator Configuration ---", file=sys.stderr)
        for k, v in sorted(params.__dict__.items()):
            if k == 'command': continue
            print(f"  {k:<30} = {v}", file=sys.stderr)
        print("----------------------------------------------", file=sys.stderr)
        logger.debug("Parsed parameters: %s", params)

        with CatalogAPI(params.base_url, timeout=params.timeout) as catalog_api:
            handle_generate(catalog_api, params)

        exit_code = 0
        print("\nCWE dictionary generated successfully.", file=sys.stderr)

    # --- Unified Exception Handling ---
    except ValidationError as e:
        # User input problems, a traceback adds nothing
        print(f"\nDetailed Error Information:", file=sys.stderr)
        print(f"Runtime Error: {e.message}", file=sys.stderr)
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=False)
        return 1
    except (RetrievalError, MemberNotFoundError, FileSystemError) as e:
        print(f"\nDetailed Error Information:", file=sys.stderr)
        print(f"Runtime Error ({e.stage}): {e.message}", file=sys.stderr)
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=True)
        return 1
    except (CatalogError, RenderError) as e:
        print(f"\nDetailed Error Information:", file=sys.stderr)
        print(f"Generation Error ({e.stage}): {e.message}", file=sys.stderr)
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=True)
        return 1
    except DictGenError as e:
        print(f"\nDetailed Error Information:", file=sys.stderr)
        print(f"CWE Dictionary Generator Error: {e.message}", file=sys.stderr)
        if logger: logger.error("Unhandled DictGenError: %s", e.message, exc_info=True)
        return 1
    except Exception as e:
        print(f"\nDetailed Error Information:", file=sys.stderr)
        print(f"Unexpected Error: {e}", file=sys.stderr)
        if logger: logger.critical("Unexpected error occurred", exc_info=True)
        return 1
    finally:
        duration_str = format_duration(time.monotonic() - start_time)
        print(f"\nTotal Execution Time: {duration_str}", file=sys.stderr)
        if logger: logger.info("Total execution time: %s", duration_str)

    return exit_code

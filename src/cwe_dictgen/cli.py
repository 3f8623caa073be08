# cwe_dictgen/cli.py

import argparse
import os
from argparse import RawTextHelpFormatter

from .api import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .exceptions import ValidationError


def _env_timeout():
    raw_timeout = os.getenv("CWE_DICTGEN_TIMEOUT")
    if not raw_timeout:
        return DEFAULT_TIMEOUT
    try:
        return int(raw_timeout)
    except ValueError:
        raise ValidationError(f"CWE_DICTGEN_TIMEOUT must be an integer, got: {raw_timeout}")


# --- Main Parsing Function ---
def parse_cmdline_args(argv=None):
    """
    Parse command line arguments.

    Args:
        argv: Argument list to parse (Default: sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed command line arguments

    Raises:
        ValidationError: If arguments are present but invalid
    """
    parser = argparse.ArgumentParser(
        prog="cwe-dictgen",
        description="Generates the CweDictionary Java class from the MITRE CWE catalog.",
        formatter_class=RawTextHelpFormatter,
        epilog="""
Environment Variables:
  CWE_DICTGEN_BASE_URL : Location hosting the cwec_v<VERSION>.xml.zip archives
  CWE_DICTGEN_TIMEOUT  : HTTP timeout in seconds

Example Usage:
  # Print the dictionary for CWE 4.14 to STDOUT
  cwe-dictgen --version 4.14 --package org.dependencytrack.parser.common.resolver

  # Write a Jakarta EE compatible dictionary to a file
  cwe-dictgen -v 4.14 -p org.dependencytrack.parser.common.resolver --jakarta \\
    -o src/main/java/org/dependencytrack/parser/common/resolver/CweDictionary.java
"""
    )
    parser.set_defaults(command="generate")

    # --- Generation Arguments ---
    generation_args = parser.add_argument_group("Generation Arguments")
    generation_args.add_argument(
        "-v", "--version",
        help="Version of the CWE dictionary (e.g., 4.14).",
        required=True,
        metavar="VERSION"
    )
    generation_args.add_argument(
        "-p", "--package",
        help="Package of the generated class.",
        dest="package_name",
        required=True,
        metavar="PACKAGE"
    )
    generation_args.add_argument(
        "-o", "--output",
        help="Path to write the output to, will write to STDOUT if not provided.",
        metavar="OUTPUT_PATH"
    )
    generation_args.add_argument(
        "--jakarta",
        help="Generate code compatible with Jakarta EE.",
        action="store_true",
        default=False
    )

    # --- Download Arguments ---
    download_args = parser.add_argument_group("Download Arguments")
    download_args.add_argument(
        "--base-url",
        help=f"Location hosting the catalog archives. Overrides CWE_DICTGEN_BASE_URL env var.\n(Default: {DEFAULT_BASE_URL})",
        default=os.getenv("CWE_DICTGEN_BASE_URL", DEFAULT_BASE_URL),
        metavar="URL"
    )
    download_args.add_argument(
        "--timeout",
        help=f"HTTP timeout in seconds. Overrides CWE_DICTGEN_TIMEOUT env var. (Default: {DEFAULT_TIMEOUT})",
        type=int,
        metavar="SECONDS"
    )

    # --- Logging Arguments ---
    log_args = parser.add_argument_group("Logging Arguments")
    log_args.add_argument(
        "--log",
        help="Logging level (Default: INFO)",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )
    log_args.add_argument(
        "--log-file",
        help="Also write the log to this file (overwritten on each run).",
        metavar="PATH"
    )

    args = parser.parse_args(argv)

    # --- Post-parse validation ---
    args.version = args.version.strip()
    if not args.version:
        raise ValidationError("Version must not be empty")

    args.package_name = args.package_name.strip()
    if not args.package_name:
        raise ValidationError("Package must not be empty")

    # The environment is only consulted when --timeout is absent
    if args.timeout is None:
        args.timeout = _env_timeout()
    if args.timeout <= 0:
        raise ValidationError(f"Timeout must be a positive number of seconds, got: {args.timeout}")

    if not args.base_url.startswith(("http://", "https://")):
        raise ValidationError(f"Base URL must start with http:// or https://, got: {args.base_url}")
    args.base_url = args.base_url.rstrip('/')

    if args.output:
        if os.path.isdir(args.output):
            raise ValidationError(f"Output path is a directory: {args.output}")
        output_dir = os.path.dirname(os.path.abspath(args.output))
        if not os.path.isdir(output_dir):
            raise ValidationError(f"Output directory does not exist: {output_dir}")

    return args

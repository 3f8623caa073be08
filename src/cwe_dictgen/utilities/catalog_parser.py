"""
Extraction of the CWE identifier-to-name mapping from a catalog document.

The catalog is untrusted remote content, so it is parsed with defusedxml and
any DTD, entity declaration or external reference is rejected outright.
"""

import re
import logging
from typing import Dict, Tuple
from xml.etree.ElementTree import Element

import defusedxml
import defusedxml.ElementTree as DefusedET
from sortedcontainers import SortedDict

from ..exceptions import MalformedDocumentError, MissingAttributeError, InvalidIdentifierError

logger = logging.getLogger("cwe-dictgen")

CATALOG_ROOT = "Weakness_Catalog"

# Applied in this order; a later query overwrites an earlier one for the same ID.
CATALOG_QUERIES: Tuple[Tuple[str, str], ...] = (
    ("Categories", "Category"),
    ("Weaknesses", "Weakness"),
    ("Views", "View"),
)

ID_ATTRIBUTE = "ID"
NAME_ATTRIBUTE = "Name"

# Identifiers are emitted as Java int literals.
MAX_IDENTIFIER = 2**31 - 1

_IDENTIFIER_PATTERN = re.compile(r"[0-9]+")


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _parse_document(document_bytes: bytes) -> Element:
    try:
        return DefusedET.fromstring(
            document_bytes,
            forbid_dtd=True,
            forbid_entities=True,
            forbid_external=True,
        )
    except defusedxml.DefusedXmlException as e:
        raise MalformedDocumentError(
            f"Catalog uses a forbidden XML construct: {e}",
            code="forbidden_construct",
            details={"error": str(e)}
        ) from e
    except DefusedET.ParseError as e:
        raise MalformedDocumentError(f"Catalog is not well-formed XML: {e}", code="parse_error") from e


def parse_identifier(raw_id: str, record_type: str) -> int:
    """
    Converts a record ID attribute to an int.

    Raises:
        InvalidIdentifierError: If the value is not a non-negative base-10
            integer literal or does not fit in a Java int
    """
    if not _IDENTIFIER_PATTERN.fullmatch(raw_id):
        raise InvalidIdentifierError(
            f"{record_type} has an invalid {ID_ATTRIBUTE} '{raw_id}': expected a non-negative integer",
            details={"record_type": record_type, "value": raw_id}
        )
    cwe_id = int(raw_id)
    if cwe_id > MAX_IDENTIFIER:
        raise InvalidIdentifierError(
            f"{record_type} {ID_ATTRIBUTE} {raw_id} exceeds the maximum of {MAX_IDENTIFIER}",
            details={"record_type": record_type, "value": raw_id}
        )
    return cwe_id


def _read_entry(record: Element, record_type: str) -> Tuple[int, str]:
    raw_id = record.get(ID_ATTRIBUTE)
    if not raw_id:
        raise MissingAttributeError(
            f"{record_type} record is missing the '{ID_ATTRIBUTE}' attribute",
            details={"record_type": record_type, "attribute": ID_ATTRIBUTE}
        )
    name = record.get(NAME_ATTRIBUTE)
    if not name:
        raise MissingAttributeError(
            f"{record_type} {raw_id} is missing the '{NAME_ATTRIBUTE}' attribute",
            details={"record_type": record_type, "attribute": NAME_ATTRIBUTE, "id": raw_id}
        )
    return parse_identifier(raw_id, record_type), name


def parse_catalog(document_bytes: bytes) -> Dict[int, str]:
    """
    Extracts every category, weakness and view from a CWE catalog.

    Records are matched by local element name so both the namespaced catalog
    published by MITRE and a namespace-free document are accepted.

    Args:
        document_bytes: Raw bytes of the cwec_v<version>.xml document

    Returns:
        Dictionary mapping CWE ID to name, in ascending ID order

    Raises:
        MalformedDocumentError: If the document cannot be parsed safely
        MissingAttributeError: If a record lacks its ID or Name
        InvalidIdentifierError: If a record ID is not a valid integer
    """
    root = _parse_document(document_bytes)
    definitions = SortedDict()

    if _local_name(root.tag) != CATALOG_ROOT:
        logger.warning(f"Unexpected catalog root element '{_local_name(root.tag)}', no records extracted")
        return {}

    for group, record_type in CATALOG_QUERIES:
        records = root.findall(f"{{*}}{group}/{{*}}{record_type}")
        logger.debug(f"Found {len(records)} {record_type} records")
        for record in records:
            cwe_id, name = _read_entry(record, record_type)
            if cwe_id in definitions and definitions[cwe_id] != name:
                logger.debug(f"{record_type} {cwe_id} overrides '{definitions[cwe_id]}' with '{name}'")
            definitions[cwe_id] = name

    logger.info(f"Extracted {len(definitions)} CWE definitions")
    return dict(definitions)

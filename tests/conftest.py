import io
import zipfile
import argparse
from xml.sax.saxutils import quoteattr

import pytest
import requests
from unittest.mock import MagicMock

from cwe_dictgen.api import CatalogAPI

CWE_NAMESPACE = "http://cwe.mitre.org/cwe-7"


@pytest.fixture
def make_catalog():
    """
    Returns a factory building catalog XML bytes.

    Each of categories/weaknesses/views is a list of (id, name) tuples; use
    None for either value to omit that attribute.
    """
    def _records(tag, entries):
        lines = []
        for cwe_id, name in entries:
            attrs = ""
            if cwe_id is not None:
                attrs += f" ID={quoteattr(str(cwe_id))}"
            if name is not None:
                attrs += f" Name={quoteattr(name)}"
            lines.append(f"<{tag}{attrs} Status=\"Stable\"><Description>text</Description></{tag}>")
        return "".join(lines)

    def _make(categories=(), weaknesses=(), views=(), namespace=CWE_NAMESPACE):
        xmlns = f' xmlns="{namespace}"' if namespace else ""
        document = (
            '<?xml version="1.0" encoding="UTF-8"?>'
            f'<Weakness_Catalog Name="CWE" Version="4.14"{xmlns}>'
            f'<Weaknesses>{_records("Weakness", weaknesses)}</Weaknesses>'
            f'<Categories>{_records("Category", categories)}</Categories>'
            f'<Views>{_records("View", views)}</Views>'
            '<External_References/>'
            '</Weakness_Catalog>'
        )
        return document.encode("utf-8")
    return _make


@pytest.fixture
def make_archive():
    """Returns a factory building in-memory ZIP archive bytes from {name: bytes}."""
    def _make(members):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as archive:
            for name, content in members.items():
                archive.writestr(name, content)
        return buffer.getvalue()
    return _make


@pytest.fixture
def make_response():
    """Returns a factory building mocked streaming requests.Response objects."""
    def _make(status_code=200, content=b"", headers=None):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.headers = headers or {"content-type": "application/zip"}
        response.iter_content.side_effect = lambda chunk_size=1: iter([content[i:i + chunk_size] for i in range(0, len(content), chunk_size)])
        return response
    return _make


@pytest.fixture
def mock_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def catalog_api_inst(mock_session):
    """CatalogAPI pointed at a dummy host with a mocked session."""
    api = CatalogAPI(base_url="https://cwe.example.com/data/xml", timeout=5)
    api.session = mock_session
    return api


@pytest.fixture
def staging_dir(tmp_path, monkeypatch):
    """Redirects tempfile's default directory so staging files can be inspected."""
    staging = tmp_path / "staging"
    staging.mkdir()
    monkeypatch.setattr("tempfile.tempdir", str(staging))
    return staging


@pytest.fixture
def mock_params():
    """Provides a parsed-arguments namespace for handler tests."""
    return argparse.Namespace(
        command="generate",
        version="4.14",
        package_name="org.example.cwe",
        output=None,
        jakarta=False,
        base_url="https://cwe.example.com/data/xml",
        timeout=5,
        log="INFO",
        log_file=None,
    )

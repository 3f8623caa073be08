# tests/integration/test_generate_integration.py
"""
End-to-end runs of the CLI with the HTTP layer mocked at requests.Session.
"""

import re
import json
import logging

import pytest

from cwe_dictgen.main import main

EXPECTED_SOURCE = '''\
/*
 * This file is part of Dependency-Track.
 *
 * Licensed under the Apache License, Version 2.0 (the "License");
 * you may not use this file except in compliance with the License.
 * You may obtain a copy of the License at
 *
 *   http://www.apache.org/licenses/LICENSE-2.0
 *
 * Unless required by applicable law or agreed to in writing, software
 * distributed under the License is distributed on an "AS IS" BASIS,
 * WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
 * See the License for the specific language governing permissions and
 * limitations under the License.
 *
 * SPDX-License-Identifier: Apache-2.0
 * Copyright (c) Steve Springett. All Rights Reserved.
 */
package org.dependencytrack.parser.common.resolver;

import javax.annotation.Generated;
import java.util.Collections;
import java.util.LinkedHashMap;
import java.util.Map;

@Generated(value = "From dictionary version 4.14")
public final class CweDictionary {

    public static final Map<Integer, String> DICTIONARY;

    static {
        final Map<Integer, String> definitions = new LinkedHashMap<>();
        definitions.put(16, "Configuration");
        definitions.put(79, "Improper Neutralization of Input During Web Page Generation ('Cross-site Scripting')");
        definitions.put(699, "Software Development");
        definitions.put(1000, "Research Concepts");
        DICTIONARY = Collections.unmodifiableMap(definitions);
    }

    private CweDictionary() {
    }

}
'''


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    monkeypatch.delenv("CWE_DICTGEN_BASE_URL", raising=False)
    monkeypatch.delenv("CWE_DICTGEN_TIMEOUT", raising=False)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def serve(mocker, make_response):
    """Patches requests.Session.get to answer with the given status and body."""
    def _serve(status_code=200, content=b""):
        return mocker.patch(
            "requests.Session.get",
            side_effect=lambda *args, **kwargs: make_response(status_code, content),
        )
    return _serve


@pytest.fixture
def catalog_archive(make_catalog, make_archive):
    document = make_catalog(
        categories=[(16, "Configuration"), (699, "Software Development")],
        weaknesses=[(79, "Improper Neutralization of Input During Web Page Generation ('Cross-site Scripting')")],
        views=[(1000, "Research Concepts"), (699, "Software Development")],
    )
    return make_archive({"cwec_v4.14.xml": document})


ARGV = ["-v", "4.14", "-p", "org.dependencytrack.parser.common.resolver"]


def test_generate_to_stdout(serve, catalog_archive, staging_dir, capsys):
    mock_get = serve(200, catalog_archive)

    assert main(ARGV) == 0

    assert capsys.readouterr().out == EXPECTED_SOURCE
    assert mock_get.call_args.args[0] == "https://cwe.mitre.org/data/xml/cwec_v4.14.xml.zip"
    assert list(staging_dir.iterdir()) == []


def test_generate_to_file(serve, catalog_archive, tmp_path, capsys):
    serve(200, catalog_archive)
    target = tmp_path / "CweDictionary.java"

    assert main(ARGV + ["-o", str(target)]) == 0

    assert target.read_text(encoding="utf-8") == EXPECTED_SOURCE
    assert capsys.readouterr().out == ""


def test_generation_is_byte_identical_across_runs(serve, catalog_archive, tmp_path):
    serve(200, catalog_archive)
    first, second = tmp_path / "first.java", tmp_path / "second.java"

    assert main(ARGV + ["-o", str(first)]) == 0
    assert main(ARGV + ["-o", str(second)]) == 0

    assert first.read_bytes() == second.read_bytes()


def test_jakarta_variant(serve, catalog_archive, capsys):
    serve(200, catalog_archive)

    assert main(ARGV + ["--jakarta"]) == 0

    output = capsys.readouterr().out
    assert "import jakarta.annotation.Generated;" in output
    assert "import javax.annotation.Generated;" not in output


def test_merge_precedence_and_escaping(serve, make_catalog, make_archive, capsys):
    tricky = 'Use of "eval" with C:\\path\nand more'
    document = make_catalog(
        categories=[(1, "category"), (2, "category")],
        weaknesses=[(1, "weakness"), (3, tricky)],
        views=[(2, "view")],
    )
    serve(200, make_archive({"cwec_v4.14.xml": document}))

    assert main(ARGV) == 0

    output = capsys.readouterr().out
    puts = re.findall(r'definitions\.put\((\d+), "((?:[^"\\]|\\.)*)"\);', output)
    assert [(int(i), json.loads(f'"{n}"')) for i, n in puts] == [
        (1, "weakness"),
        (2, "view"),
        (3, tricky),
    ]


def test_empty_catalog_generates_empty_dictionary(serve, make_catalog, make_archive, capsys):
    serve(200, make_archive({"cwec_v4.14.xml": make_catalog()}))

    assert main(ARGV) == 0

    output = capsys.readouterr().out
    assert "public final class CweDictionary" in output
    assert "definitions.put(" not in output


def test_http_404_fails_without_output(serve, tmp_path, staging_dir, capsys):
    serve(404, b"Not Found")
    target = tmp_path / "CweDictionary.java"

    assert main(ARGV + ["-o", str(target)]) == 1

    captured = capsys.readouterr()
    assert "Expected response code 200, but got: 404" in captured.err
    assert captured.out == ""
    assert not target.exists()
    assert list(staging_dir.iterdir()) == []


def test_missing_member_fails_without_output(serve, make_archive, tmp_path, staging_dir, capsys):
    serve(200, make_archive({"cwec_v4.13.xml": b"<Weakness_Catalog/>"}))
    target = tmp_path / "CweDictionary.java"

    assert main(ARGV + ["-o", str(target)]) == 1

    assert "Dictionary file 'cwec_v4.14.xml' not found in ZIP archive" in capsys.readouterr().err
    assert not target.exists()
    assert list(staging_dir.iterdir()) == []


def test_doctype_fails_without_output(serve, make_archive, tmp_path, capsys):
    document = b'<?xml version="1.0"?><!DOCTYPE Weakness_Catalog><Weakness_Catalog/>'
    serve(200, make_archive({"cwec_v4.14.xml": document}))
    target = tmp_path / "CweDictionary.java"
    target.write_text("previous", encoding="utf-8")

    assert main(ARGV + ["-o", str(target)]) == 1

    captured = capsys.readouterr()
    assert "Catalog document could not be parsed" in captured.err
    assert captured.out == ""
    assert target.read_text(encoding="utf-8") == "previous"

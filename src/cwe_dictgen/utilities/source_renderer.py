"""
Rendering of the CWE dictionary as a Java source file.

The output is produced from a fixed Jinja2 template. Rendering is fully
deterministic: the same context always yields byte-identical text.
"""

import json
import logging
from dataclasses import dataclass
from typing import Mapping, Tuple

from jinja2 import Environment, StrictUndefined, TemplateError

from ..exceptions import RenderError

logger = logging.getLogger("cwe-dictgen")

DICTIONARY_TEMPLATE = """\
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
package {{ package_name }};

{% if jakarta %}
import jakarta.annotation.Generated;
{% else %}
import javax.annotation.Generated;
{% endif %}
import java.util.Collections;
import java.util.LinkedHashMap;
import java.util.Map;

@Generated(value = "From dictionary version {{ version | json_escape }}")
public final class CweDictionary {

    public static final Map<Integer, String> DICTIONARY;

    static {
        final Map<Integer, String> definitions = new LinkedHashMap<>();
        {% for cwe_id, name in entries %}
        definitions.put({{ cwe_id }}, "{{ name | json_escape }}");
        {% endfor %}
        DICTIONARY = Collections.unmodifiableMap(definitions);
    }

    private CweDictionary() {
    }

}
"""


def json_escape(value) -> str:
    """Escapes text for embedding inside a double-quoted JSON (or Java) string literal."""
    return json.dumps(str(value), ensure_ascii=False)[1:-1]


def _create_environment() -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["json_escape"] = json_escape
    return env


@dataclass(frozen=True)
class RenderContext:
    """Everything the template needs; entries are (id, name) pairs in ascending ID order."""
    entries: Tuple[Tuple[int, str], ...]
    package_name: str
    version: str
    jakarta: bool = False

    @classmethod
    def create(cls, definitions: Mapping[int, str], package_name: str, version: str, jakarta: bool = False) -> "RenderContext":
        return cls(
            entries=tuple(sorted(definitions.items())),
            package_name=package_name,
            version=version,
            jakarta=bool(jakarta),
        )


def render_dictionary(context: RenderContext, template_source: str = DICTIONARY_TEMPLATE) -> str:
    """
    Renders the CweDictionary Java source for the given context.

    Args:
        context: The render context
        template_source: Template text (Default: DICTIONARY_TEMPLATE)

    Returns:
        The complete generated source text

    Raises:
        RenderError: If the template fails to compile or references a value
            missing from the context
    """
    try:
        template = _create_environment().from_string(template_source)
        output = template.render(
            entries=context.entries,
            package_name=context.package_name,
            version=context.version,
            jakarta=context.jakarta,
        )
    except TemplateError as e:
        raise RenderError(f"Failed to render CWE dictionary template: {e}", details={"error": str(e)}) from e

    logger.info(f"Rendered {len(context.entries)} dictionary entries")
    return output

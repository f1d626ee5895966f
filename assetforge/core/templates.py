"""Client template preparation and the self-registering templates chunk.

Templates are handlebars HTML.  Each one is minified, its ``{{...}}``
fragments tidied, comments stripped, and then handed to the registry's
template compiler.  The compiled expressions are emitted as one script
chunk that registers every template with the client runtime.
"""

from __future__ import annotations

import json
import re

from assetforge.core.transforms import TemplateCompiler, TextTransform

TEMPLATES_PLACEHOLDER = "/* {{ templates }} */"

CHUNK_PREFIX = (
    "(function(){var template=Handlebars.template,"
    "templates=Handlebars.templates=Handlebars.templates||{};"
)
CHUNK_SUFFIX = "Handlebars.partials=Handlebars.templates})();"

_SPACE_AROUND = re.compile(r"(>|^|}}) ({{|<|$)")
_FRAGMENT = re.compile(r"({{2,})([\s\S]*?)(}{2,})")
_COMMENT = re.compile(r"{{![\s\S]+?..}}")


def template_name(filename: str) -> str:
    """Template name is the filename up to its first dot."""
    return filename.split(".", 1)[0]


def _tidy_fragment(match: re.Match[str]) -> str:
    inner = re.sub(r" {2,}", " ", match.group(2).replace("\n", " ")).strip()
    return match.group(1) + inner + match.group(3)


def prepare_template(html: str, minify_html: TextTransform | None = None) -> str:
    """Normalize one template's HTML before compilation.

    Removes single spaces between tags and ``{{fragments}}``, collapses
    whitespace inside fragments and strips the first ``{{! comment }}``.
    """
    if minify_html is not None:
        html = minify_html(html)
    html = _SPACE_AROUND.sub(r"\1\2", html)
    html = _FRAGMENT.sub(_tidy_fragment, html).strip()
    return _COMMENT.sub("", html, count=1)


def render_chunk(templates: dict[str, str], compiler: TemplateCompiler) -> str:
    """Compile prepared templates into one self-registering script chunk.

    Templates are emitted in sorted name order so the bundle is stable.
    """
    parts = [CHUNK_PREFIX]
    for name in sorted(templates):
        compiled = compiler(name, templates[name])
        parts.append(f"templates[{json.dumps(name)}]={compiled};")
    parts.append(CHUNK_SUFFIX)
    return "".join(parts)

"""Tests for template preparation and the registration chunk."""

from __future__ import annotations

from assetforge.core.templates import (
    CHUNK_PREFIX,
    CHUNK_SUFFIX,
    prepare_template,
    render_chunk,
    template_name,
)
from assetforge.core.transforms import handlebars_source_compiler


class TestTemplateName:
    def test_up_to_first_dot(self):
        assert template_name("file-list.hbs") == "file-list"
        assert template_name("view.partial.html") == "view"


class TestPrepareTemplate:
    def test_space_between_tag_and_fragment_removed(self):
        assert prepare_template("<div> {{name}}</div>") == "<div>{{name}}</div>"

    def test_whitespace_inside_fragment_collapsed(self):
        html = "<p>{{#if\n   a    b}}x{{/if}}</p>"
        assert prepare_template(html) == "<p>{{#if a b}}x{{/if}}</p>"

    def test_comment_stripped(self):
        assert prepare_template("{{!-- note --}}<p>x</p>") == "<p>x</p>"

    def test_only_first_comment_stripped(self):
        out = prepare_template("{{!-- one --}}<p>x</p>{{!-- two --}}")
        assert out == "<p>x</p>{{!-- two --}}"

    def test_minifier_applied_first(self):
        calls = []

        def minify(html: str) -> str:
            calls.append(html)
            return html.replace("\n", "")

        assert prepare_template("<p>\n</p>", minify) == "<p></p>"
        assert calls == ["<p>\n</p>"]


class TestRenderChunk:
    def test_wraps_and_registers_sorted(self):
        chunk = render_chunk({"b": "<b></b>", "a": "<a></a>"}, lambda name, html: f"T({name})")
        assert chunk.startswith(CHUNK_PREFIX)
        assert chunk.endswith(CHUNK_SUFFIX)
        assert chunk.index('templates["a"]=T(a);') < chunk.index('templates["b"]=T(b);')

    def test_default_compiler_embeds_escaped_source(self):
        compiled = handlebars_source_compiler("x", '<p class="a">\'{{y}}\'</p>')
        assert compiled == 'Handlebars.compile("<p class=\\"a\\">\'{{y}}\'</p>")'

    def test_empty(self):
        assert render_chunk({}, handlebars_source_compiler) == CHUNK_PREFIX + CHUNK_SUFFIX

"""Tests for the transform registry."""

from __future__ import annotations

import gzip

import pytest

from assetforge.core.errors import TransformUnavailableError
from assetforge.core.transforms import (
    SLOT_PACKAGES,
    TransformRegistry,
    handlebars_source_compiler,
    stdlib_gzip,
)


class TestRegistryDefaults:
    def test_empty_registry_has_only_always_available_slots(self):
        registry = TransformRegistry()
        assert registry.is_available("gzip_fast")
        assert registry.is_available("compile_template")
        for slot in ("minify_js", "minify_css", "minify_html", "gzip_best", "brotli", "prefix_css"):
            assert not registry.is_available(slot)

    def test_require_missing_raises_with_package_hint(self):
        registry = TransformRegistry()
        with pytest.raises(TransformUnavailableError, match="rjsmin") as info:
            registry.require("minify_js")
        assert info.value.transform == "minify_js"

    def test_require_returns_callable(self):
        registry = TransformRegistry(minify_css=str.strip)
        assert registry.require("minify_css")("  a  ") == "a"

    def test_describe_lists_every_slot(self):
        registry = TransformRegistry(minify_js=str.strip)
        described = registry.describe()
        assert set(described) == set(SLOT_PACKAGES)
        assert described["minify_js"] == "custom"
        assert described["brotli"] is None

    def test_frozen(self):
        registry = TransformRegistry()
        with pytest.raises(Exception):
            registry.minify_js = str.strip  # type: ignore[misc]


class TestDetect:
    def test_detect_finds_installed_backends(self):
        registry = TransformRegistry.detect()
        assert registry.backends["minify_js"] == "rjsmin"
        assert registry.backends["minify_css"] == "rcssmin"
        assert registry.backends["brotli"] == "brotli"
        assert registry.backends["gzip_fast"] == "gzip (stdlib)"

    def test_detected_js_minifier_minifies(self):
        registry = TransformRegistry.detect()
        out = registry.require("minify_js")("function  a ( b ) {\n  return b ;\n}\n")
        assert len(out) < len("function  a ( b ) {\n  return b ;\n}\n")

    def test_detected_css_minifier_keeps_media_blocks(self):
        registry = TransformRegistry.detect()
        css = "@media (max-width: 600px) {\n  .a { color: red; }\n}\n"
        out = registry.require("minify_css")(css)
        assert "@media" in out
        assert ".a{color:red}" in out.replace(";}", "}")

    def test_detected_brotli_round_trips(self):
        import brotli

        registry = TransformRegistry.detect(brotli_quality=5)
        data = b"hello hello hello hello"
        assert brotli.decompress(registry.require("brotli")(data)) == data


class TestBuiltins:
    def test_stdlib_gzip_is_reproducible(self):
        assert stdlib_gzip(b"abc") == stdlib_gzip(b"abc")
        assert gzip.decompress(stdlib_gzip(b"abc")) == b"abc"

    def test_handlebars_source_compiler(self):
        assert handlebars_source_compiler("n", "<p>x</p>") == 'Handlebars.compile("<p>x</p>")'

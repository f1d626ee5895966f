"""Tests for SVG sprite providers."""

from __future__ import annotations

from pathlib import Path

from assetforge.config import AssetSettings
from assetforge.core.cache_store import CacheStore
from assetforge.core.sprites import DirectorySpriteProvider, SpriteProvider, empty_sprite


class TestEmptySprite:
    def test_returns_nothing(self):
        assert empty_sprite() == ""

    def test_satisfies_protocol(self):
        assert isinstance(DirectorySpriteProvider(Path(".")), SpriteProvider)


class TestDirectorySpriteProvider:
    def test_symbols_in_sorted_order(self, tmp_path: Path):
        (tmp_path / "zoom.svg").write_text(
            '<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">'
            '<path d="M0 0"/></svg>\n'
        )
        (tmp_path / "add.svg").write_text("<svg viewBox='0 0 8 8'><circle r='1'/></svg>")
        (tmp_path / "notes.txt").write_text("ignored")

        sprite = DirectorySpriteProvider(tmp_path)()
        assert sprite == (
            '<svg style="display:none">'
            '<symbol id="add" viewBox="0 0 8 8"><circle r=\'1\'/></symbol>'
            '<symbol id="zoom" viewBox="0 0 16 16"><path d="M0 0"/></symbol>'
            "</svg>"
        )

    def test_file_without_svg_root(self, tmp_path: Path):
        (tmp_path / "raw.svg").write_text("<path d='M1 1'/>")
        assert DirectorySpriteProvider(tmp_path)() == (
            '<svg style="display:none"><symbol id="raw"><path d=\'M1 1\'/></symbol></svg>'
        )

    def test_empty_directory(self, tmp_path: Path):
        assert DirectorySpriteProvider(tmp_path)() == ""

    def test_store_uses_configured_directory(self, source_root: Path, sources, transforms):
        icons = source_root / "icons"
        icons.mkdir()
        (icons / "menu.svg").write_text('<svg viewBox="0 0 4 4"><rect/></svg>')

        settings = AssetSettings(root=source_root, svg_dir=Path("icons"))
        store = CacheStore(settings=settings, sources=sources, transforms=transforms)
        collection = store.load_sync(dev=True)
        assert '<symbol id="menu" viewBox="0 0 4 4"><rect/></symbol>' in (
            collection.get("res", "main.html").data.decode()
        )

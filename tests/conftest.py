from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from themectx.discovery import LocalFileSource
from themectx.knowledge import StaticContextMap

ThemeFactory = Callable[[dict[str, str]], Path]


@pytest.fixture
def make_theme(tmp_path: Path) -> ThemeFactory:
    """Write a theme from a mapping of relative path -> file content."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "theme"
        root.mkdir(exist_ok=True)
        for rel_path, content in files.items():
            target = root / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def storefront(make_theme: ThemeFactory) -> Path:
    """Small theme: price snippet -> hero section -> product template."""
    return make_theme({
        "layout/theme.liquid": "{{ content_for_layout }}",
        "templates/product.json": (
            "/* Auto-generated by the theme editor */\n"
            '{"sections": {"main": {"type": "hero", "settings": {}}}, "order": ["main"]}'
        ),
        "templates/page.liquid": "{{ page.content }}",
        "sections/hero.liquid": "<div>{% render 'price' %}</div>",
        "snippets/price.liquid": "{{ product.price | money }}",
    })


@pytest.fixture
def storefront_source(storefront: Path) -> LocalFileSource:
    return LocalFileSource(storefront)


@pytest.fixture
def context_map() -> StaticContextMap:
    return StaticContextMap.model_validate({
        "globals": ["shop", "cart", "settings"],
        "template_map": {
            "product": ["product", "recommendations"],
            "collection": ["collection"],
            "article": ["article", "blog"],
            "blog": ["blog"],
        },
    })

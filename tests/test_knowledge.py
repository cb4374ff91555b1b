"""Tests for the bundled knowledge base and context map loaders."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from themectx.exceptions import KnowledgeBaseError
from themectx.knowledge import (
    default_context_map,
    default_knowledge_base,
    load_context_map,
    load_knowledge_base,
)


class TestContextMap:
    def test_bundled_map_loads(self) -> None:
        context_map = default_context_map()

        assert "shop" in context_map.global_objects
        assert "product" in context_map.objects_for("product")
        assert context_map.objects_for("predictive_search") == ("predictive_search",)
        assert context_map.objects_for("metaobject") == ("metaobject",)

    def test_loaded_once(self) -> None:
        assert default_context_map() is default_context_map()

    def test_global_key_resolves_to_globals(self) -> None:
        context_map = default_context_map()
        assert context_map.objects_for("global") == context_map.global_objects

    def test_unknown_key_has_no_objects(self) -> None:
        assert default_context_map().objects_for("nope") == ()

    def test_is_immutable(self) -> None:
        with pytest.raises(ValidationError):
            default_context_map().global_objects = ()

    def test_custom_map(self, tmp_path: Path) -> None:
        path = tmp_path / "map.json"
        path.write_text(json.dumps({"globals": ["shop"], "template_map": {"faq": ["page"]}}))

        context_map = load_context_map(path)

        assert context_map.context_keys == ["faq"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(KnowledgeBaseError) as exc_info:
            load_context_map(tmp_path / "missing.json")
        assert "missing.json" in exc_info.value.source

    def test_invalid_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "map.json"
        path.write_text(json.dumps({"globals": "shop", "template_map": []}))

        with pytest.raises(KnowledgeBaseError):
            load_context_map(path)


class TestKnowledgeBase:
    def test_bundled_objects_load(self) -> None:
        knowledge = default_knowledge_base()

        assert "product" in knowledge
        product = knowledge.get("product")
        assert product is not None
        assert product.properties["featured_image"].type == "image"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "objects.json"
        path.write_text("{not json")

        with pytest.raises(KnowledgeBaseError):
            load_knowledge_base(path)

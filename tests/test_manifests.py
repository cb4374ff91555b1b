"""Tests for JSON template scanning."""

from __future__ import annotations

import json

from themectx.discovery import (
    Context,
    LocalFileSource,
    ManifestScanner,
    PathOverride,
    ScanErrorKind,
    strip_json_comments,
)
from themectx.discovery.manifests import iter_fragment_types, references_fragment


def _manifest(*section_types: str) -> str:
    return json.dumps({
        "sections": {f"s{i}": {"type": t, "settings": {}} for i, t in enumerate(section_types)},
        "order": [f"s{i}" for i in range(len(section_types))],
    })


class TestStripJsonComments:
    def test_removes_block_and_line_comments(self) -> None:
        text = '/*\n header\n*/\n{"a": 1, // trailing\n "b": 2}'
        assert json.loads(strip_json_comments(text)) == {"a": 1, "b": 2}

    def test_keeps_comment_markers_inside_strings(self) -> None:
        text = '{"url": "https://example.com/*x*/", "note": "a // b"}'
        assert json.loads(strip_json_comments(text)) == {
            "url": "https://example.com/*x*/",
            "note": "a // b",
        }

    def test_handles_escaped_quotes(self) -> None:
        text = '{"q": "say \\"hi\\" // not a comment"} // comment'
        assert json.loads(strip_json_comments(text)) == {"q": 'say "hi" // not a comment'}


class TestFragmentTypes:
    def test_ignores_documents_without_sections(self) -> None:
        assert list(iter_fragment_types(["not", "a", "mapping"])) == []
        assert list(iter_fragment_types({"sections": []})) == []
        assert list(iter_fragment_types({"order": []})) == []

    def test_nested_blocks_only_when_requested(self) -> None:
        document = {
            "sections": {
                "s": {"type": "featured", "blocks": {"b": {"type": "promo", "blocks": {"c": {"type": "badge"}}}}},
            }
        }
        assert list(iter_fragment_types(document)) == ["featured"]
        assert list(iter_fragment_types(document, include_blocks=True)) == ["featured", "promo", "badge"]

    def test_type_comparison_is_case_insensitive(self) -> None:
        assert references_fragment({"sections": {"a": {"type": "Hero"}}}, "hERO")


class TestManifestScanner:
    def test_finds_templates_using_section(self, make_theme) -> None:
        root = make_theme({
            "templates/product.json": _manifest("main-product", "hero"),
            "templates/page.json": _manifest("rich-text"),
            "templates/index.json": _manifest("hero"),
        })
        scanner = ManifestScanner(LocalFileSource(root))

        contexts = scanner.find_contexts_using("hero")

        assert {c.context_key for c in contexts} == {"product", "index"}

    def test_variant_template_keeps_qualified_display_name(self, make_theme) -> None:
        root = make_theme({"templates/collection.wholesale.json": _manifest("hero")})

        contexts = ManifestScanner(LocalFileSource(root)).find_contexts_using("hero")

        assert contexts == [Context(context_key="collection", display_name="collection.wholesale")]

    def test_metaobject_templates_collapse_to_one_key(self, make_theme) -> None:
        root = make_theme({
            "templates/metaobject/book.json": _manifest("book-detail"),
            "templates/metaobject/author.alt.json": _manifest("book-detail"),
        })

        contexts = ManifestScanner(LocalFileSource(root)).find_contexts_using("book-detail")

        assert [c.context_key for c in contexts] == ["metaobject", "metaobject"]

    def test_custom_path_override(self, make_theme) -> None:
        root = make_theme({"templates/customers/login.json": _manifest("login-form")})
        scanner = ManifestScanner(
            LocalFileSource(root),
            path_overrides=(PathOverride(segment="templates/customers/", context_key="customer"),),
        )

        assert scanner.find_contexts_using("login-form") == [
            Context(context_key="customer", display_name="customer")
        ]

    def test_malformed_manifest_is_skipped(self, make_theme) -> None:
        root = make_theme({
            "templates/article.json": _manifest("hero"),
            "templates/broken.json": '{"sections": {"a": {"type": "hero"}',
            "templates/product.json": _manifest("hero"),
        })
        scanner = ManifestScanner(LocalFileSource(root))

        result = scanner.scan("hero")

        assert [c.context_key for c in result.contexts] == ["article", "product"]
        assert len(result.errors) == 1
        assert result.errors[0].kind == ScanErrorKind.MANIFEST_UNPARSABLE
        assert result.errors[0].path == "templates/broken.json"

    def test_commented_manifest_parses(self, make_theme) -> None:
        root = make_theme({
            "templates/product.json": "/* generated */\n" + _manifest("hero") + "\n// end",
        })

        assert ManifestScanner(LocalFileSource(root)).find_contexts_using("hero") == [
            Context(context_key="product", display_name="product")
        ]

    def test_ignores_json_outside_templates(self, make_theme) -> None:
        root = make_theme({
            "sections/header-group.json": _manifest("hero"),
            "config/settings_data.json": _manifest("hero"),
        })

        assert ManifestScanner(LocalFileSource(root)).find_contexts_using("hero") == []

    def test_parallel_scan_keeps_enumeration_order(self, make_theme) -> None:
        root = make_theme({f"templates/p{i:02d}.json": _manifest("hero") for i in range(20)})
        scanner = ManifestScanner(LocalFileSource(root), max_workers=4)

        contexts = scanner.find_contexts_using("hero")

        assert [c.display_name for c in contexts] == [f"p{i:02d}" for i in range(20)]

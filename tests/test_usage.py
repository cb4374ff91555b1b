"""Tests for the snippet usage graph."""

from __future__ import annotations

import pytest

from themectx.discovery import (
    FileCategory,
    LocalFileSource,
    UsageEdge,
    UsageGraph,
    UsageGraphBuilder,
    strip_liquid_comments,
)
from themectx.discovery.usage import directive_pattern

INCLUDES_PRICE = [
    "{% render 'price' %}",
    '{% render "price" %}',
    "{%- render 'price' -%}",
    "{% include 'price' %}",
    "{% RENDER 'price', product: product %}",
    "{%    render\n   'price' for items as item %}",
]

OTHER_DIRECTIVES = [
    "{% render 'price-list' %}",
    "{% render 'price\" %}",
    "{% section 'price' %}",
    "{{ 'price' }}",
]


class TestCommentStripping:
    def test_removes_block_comments_across_lines(self) -> None:
        text = "a{% comment %}\n{% render 'price' %}\n{% endcomment %}b"
        assert strip_liquid_comments(text) == "ab"

    def test_removes_trimmed_block_comments(self) -> None:
        text = "{%- comment -%}{% render 'x' %}{%- endcomment -%}kept"
        assert strip_liquid_comments(text) == "kept"

    def test_block_comment_is_non_greedy(self) -> None:
        text = "{% comment %}a{% endcomment %}middle{% comment %}b{% endcomment %}"
        assert strip_liquid_comments(text) == "middle"

    def test_removes_inline_comments(self) -> None:
        text = "{% # render 'price' %}{{ x }}"
        assert strip_liquid_comments(text) == "{{ x }}"


class TestDirectivePattern:
    @pytest.mark.parametrize("source", INCLUDES_PRICE)
    def test_matches_render_and_include(self, source: str) -> None:
        assert directive_pattern("price").search(source)

    @pytest.mark.parametrize("source", OTHER_DIRECTIVES)
    def test_rejects_other_directives_and_names(self, source: str) -> None:
        assert not directive_pattern("price").search(source)

    def test_fragment_name_is_literal(self) -> None:
        pattern = directive_pattern("price.v2")
        assert pattern.search("{% render 'price.v2' %}")
        assert not pattern.search("{% render 'pricexv2' %}")

    def test_special_characters_do_not_break_pattern(self) -> None:
        assert directive_pattern("icon(+)").search("{% render 'icon(+)' %}")


class TestGraphMatching:
    """The same directive forms, through the single-pass graph scan."""

    @staticmethod
    def _includers(make_theme, source: str, snippet: str) -> list[str]:
        root = make_theme({"sections/hero.liquid": source})
        graph, _ = UsageGraphBuilder(LocalFileSource(root)).build_graph()
        return [edge.includer for edge in graph.includers(snippet)]

    @pytest.mark.parametrize("source", INCLUDES_PRICE)
    def test_matches_render_and_include(self, make_theme, source: str) -> None:
        assert self._includers(make_theme, source, "price") == ["hero"]

    @pytest.mark.parametrize("source", OTHER_DIRECTIVES)
    def test_rejects_other_directives_and_names(self, make_theme, source: str) -> None:
        assert self._includers(make_theme, source, "price") == []

    def test_fragment_name_is_literal(self, make_theme) -> None:
        assert self._includers(make_theme, "{% render 'pricexv2' %}", "price.v2") == []
        assert self._includers(make_theme, "{% render 'price.v2' %}", "price.v2") == ["hero"]


class TestUsageGraphBuilder:
    def test_find_includers_reports_category(self, make_theme) -> None:
        root = make_theme({
            "sections/hero.liquid": "{% render 'price' %}",
            "templates/page.liquid": "{% include 'price' %}",
            "layout/theme.liquid": "{% render 'price' %}",
            "snippets/card.liquid": "{% render 'price' %}",
            "snippets/price.liquid": "{{ product.price }}",
        })

        edges = UsageGraphBuilder(LocalFileSource(root)).find_includers("price")

        assert {(e.includer, e.includer_category) for e in edges} == {
            ("hero", FileCategory.SECTION),
            ("page", FileCategory.TEMPLATE),
            ("theme", FileCategory.LAYOUT),
            ("card", FileCategory.SNIPPET),
        }
        assert all(e.included == "price" for e in edges)

    def test_commented_out_usage_is_not_an_edge(self, make_theme) -> None:
        root = make_theme({
            "sections/hero.liquid": "{% comment %}{% render 'price' %}{% endcomment %}",
            "sections/footer.liquid": "{% # render 'price' %}",
        })

        assert UsageGraphBuilder(LocalFileSource(root)).find_includers("price") == []

    def test_build_graph_collects_every_edge(self, make_theme) -> None:
        root = make_theme({
            "sections/hero.liquid": "{% render 'price' %}{% render 'badge' %}{% render 'price' %}",
            "snippets/price.liquid": "{% render 'badge' %}",
        })

        graph, result = UsageGraphBuilder(LocalFileSource(root)).build_graph()

        assert result.files_processed == 2
        assert {e.includer for e in graph.includers("badge")} == {"hero", "price"}
        assert [e.includer for e in graph.includers("price")] == ["hero"]
        assert graph.includers("unknown") == []


class TestUsageGraph:
    def test_transitive_includers_walk_through_snippets(self) -> None:
        graph = UsageGraph.from_edges([
            UsageEdge(includer="card", includer_category=FileCategory.SNIPPET, included="price"),
            UsageEdge(includer="grid", includer_category=FileCategory.SNIPPET, included="card"),
            UsageEdge(includer="collection", includer_category=FileCategory.SECTION, included="grid"),
        ])

        edges = graph.transitive_includers("price")

        assert [(e.includer, e.included) for e in edges] == [
            ("card", "price"),
            ("grid", "card"),
            ("collection", "grid"),
        ]

    def test_include_cycles_terminate(self) -> None:
        graph = UsageGraph.from_edges([
            UsageEdge(includer="a", includer_category=FileCategory.SNIPPET, included="b"),
            UsageEdge(includer="b", includer_category=FileCategory.SNIPPET, included="a"),
            UsageEdge(includer="hero", includer_category=FileCategory.SECTION, included="a"),
        ])

        includers = {e.includer for e in graph.transitive_includers("a")}

        assert includers == {"b", "a", "hero"}

    def test_section_named_like_snippet_is_a_separate_node(self) -> None:
        graph = UsageGraph.from_edges([
            UsageEdge(includer="price", includer_category=FileCategory.SECTION, included="price"),
        ])

        assert [(e.includer, e.includer_category) for e in graph.transitive_includers("price")] == [
            ("price", FileCategory.SECTION)
        ]

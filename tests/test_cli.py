"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from themectx.__main__ import main


class TestCli:
    def test_contexts_json(self, storefront: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["--json", "contexts", str(storefront), "snippets/price.liquid"])

        assert exit_code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["category"] == "snippet"
        assert payload["contexts"] == [{"contextKey": "product", "displayName": "product"}]
        assert payload["errors"] == []

    def test_contexts_table(self, storefront: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["contexts", str(storefront), "templates/product.liquid"])

        assert exit_code == 0
        assert "product" in capsys.readouterr().out

    def test_complete_table(self, storefront: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["complete", str(storefront), "snippets/price.liquid", "{{ product."])

        assert exit_code == 0
        assert "title" in capsys.readouterr().out

    def test_missing_theme_root(self, tmp_path: Path) -> None:
        assert main(["contexts", str(tmp_path / "nope"), "snippets/price.liquid"]) == 2

"""
Unit tests for the command-line interface.
"""

import json
import logging

import pytest
import structlog
from click.testing import CliRunner

from seolens.cli import cli

PAGE = """
<html><head><title>Shop</title></head><body>
<a href="/cart">Cart</a>
<a href="https://ads.example.net/" rel="nofollow">Ad</a>
<img src="/logo.png" alt="Logo">
</body></html>
"""


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


@pytest.fixture
def runner(tmp_path, monkeypatch):
    # Keep config discovery away from the developer's working directory
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield CliRunner()
    # The CLI points the root handler at the runner's stderr, which is closed afterwards
    root.handlers, root.level = handlers, level
    structlog.reset_defaults()


class TestCli:
    def test_extract_json(self, runner, page_file):
        result = runner.invoke(cli, ["extract", str(page_file), "--url", "https://shop.example.com/"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["title"] == "Shop"
        assert data["images"][0]["resolved_url"] == "https://shop.example.com/logo.png"

    def test_extract_from_stdin(self, runner):
        result = runner.invoke(cli, ["extract", "-", "--url", "https://shop.example.com/"], input=PAGE)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["links"]["internal"][0]["display_text"] == "Cart"

    def test_extract_summary(self, runner, page_file):
        result = runner.invoke(cli, ["extract", str(page_file), "--url", "https://shop.example.com/", "--summary"])
        assert result.exit_code == 0, result.output
        assert "Images" in result.stdout

    def test_extract_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["extract", str(tmp_path / "nope.html"), "--url", "https://x.example/"])
        assert result.exit_code != 0

    def test_highlight(self, runner, page_file):
        result = runner.invoke(
            cli, ["highlight", str(page_file), "--url", "https://shop.example.com/", "--type", "nofollow"]
        )
        assert result.exit_code == 0, result.output
        assert 'class="seo-highlight-nofollow"' in result.stdout
        assert 'id="seo-analyzer-highlight-styles"' in result.stdout

    def test_highlight_rejects_unknown_type(self, runner, page_file):
        result = runner.invoke(cli, ["highlight", str(page_file), "--url", "https://x.example/", "--type", "ugc"])
        assert result.exit_code == 2

    def test_malformed_config_file(self, runner, page_file, tmp_path):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("extraction: [unclosed\n")
        result = runner.invoke(
            cli, ["--config", str(config_file), "extract", str(page_file), "--url", "https://x.example/"]
        )
        assert result.exit_code == 1
        assert "Invalid configuration" in result.stderr
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_invalid_discovered_config(self, runner, page_file, tmp_path):
        (tmp_path / "seolens.yaml").write_text("extraction:\n  tiny_image_threshold: -5\n")
        result = runner.invoke(cli, ["extract", str(page_file), "--url", "https://x.example/"])
        assert result.exit_code == 1
        assert "seolens.yaml" in result.stderr

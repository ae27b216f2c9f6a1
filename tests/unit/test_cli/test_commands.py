"""Tests for CLI commands using click's CliRunner."""
from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from channel_explorer.cli.commands._options import build_specs
from channel_explorer.cli.main import cli
from channel_explorer.features.channels.schemas import SortDirection, SortField
from channel_explorer.features.sync import ChannelSyncService
from channel_explorer.infra.logging import clear_log_context, get_log_context


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def data_file(tmp_path, channel_records):
    path = tmp_path / "channels.json"
    path.write_text(json.dumps({"data": channel_records}), encoding="utf-8")
    return path


@pytest.mark.unit
class TestBuildSpecs:
    """Tests for option parsing into filter and sort specs."""

    def test_explicit_options_override_query(self):
        filters, sort = build_specs(
            query="quality=low&sort=rpm&dir=asc",
            sort_field=None,
            sort_dir="desc",
            quality=("high",),
            is_monetized=None,
            categories=(),
        )

        assert filters.quality == ("high",)
        assert filters.is_monetized is None
        assert sort.field is SortField.RPM
        assert sort.direction is SortDirection.DESC

    def test_no_options(self):
        filters, sort = build_specs()

        assert filters.is_default
        assert sort.field is SortField.SUBSCRIBERS


@pytest.mark.unit
class TestBrowseCommands:
    """Tests for browse, count and categories."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "browse" in result.output

    def test_browse_two_pages(self, runner, data_file):
        result = runner.invoke(cli, ["browse", "--data", str(data_file), "--pages", "2"])

        assert result.exit_code == 0, result.output
        assert "Page 1 of 2 (~40 matching)" in result.output
        assert "Page 2 of 2" in result.output
        assert "Channel 39" in result.output
        assert "Monetized: 13/25 (52.00%)  Faceless: 9/25 (36.00%)" in result.output
        assert "Monetized: 7/15 (46.67%)" in result.output

    def test_browse_past_the_end(self, runner, data_file):
        result = runner.invoke(cli, ["browse", "--data", str(data_file), "--pages", "3"])

        assert result.exit_code == 0, result.output
        assert "No more pages" in result.output

    def test_browse_with_filters(self, runner, data_file):
        result = runner.invoke(
            cli,
            ["browse", "--data", str(data_file), "--quality", "high", "--not-monetized"],
        )

        assert result.exit_code == 0, result.output
        assert "quality=high" in result.output
        assert "monetized=false" in result.output
        assert "Channel 3 " in result.output
        assert "Channel 0 " not in result.output

    def test_count(self, runner, data_file):
        result = runner.invoke(cli, ["count", "--data", str(data_file), "--min-rev", "1000"])

        assert result.exit_code == 0, result.output
        assert "30 channels (2 pages of 25)" in result.output

    def test_categories(self, runner, data_file):
        result = runner.invoke(cli, ["categories", "--data", str(data_file)])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "Cooking", "Education", "Gaming", "Gaming Tips", "Lifestyle", "Tech",
        ]

    def test_categories_empty_store(self, runner):
        result = runner.invoke(cli, ["categories"])

        assert result.exit_code == 0
        assert "No categories found" in result.output

    def test_command_name_bound_for_logging(self, runner, data_file):
        clear_log_context()
        try:
            result = runner.invoke(cli, ["categories", "--data", str(data_file)])

            assert result.exit_code == 0, result.output
            assert get_log_context()["command"] == "categories"
        finally:
            clear_log_context()


@pytest.mark.unit
class TestSyncCommand:
    """Tests for sync."""

    def test_missing_configuration_exits(self, runner, monkeypatch):
        monkeypatch.delenv("SYNC_API_URL", raising=False)
        monkeypatch.delenv("SYNC_API_TOKEN", raising=False)

        result = runner.invoke(cli, ["sync"])

        assert result.exit_code == 1
        assert "Source API is not configured" in result.output

    def test_sync_prints_summary(self, runner, monkeypatch, channel_records):
        async def fake_fetch(self):
            return channel_records[:3]

        monkeypatch.setattr(ChannelSyncService, "fetch", fake_fetch)

        result = runner.invoke(cli, ["sync"])

        assert result.exit_code == 0, result.output
        assert "Channels processed: 3" in result.output
        assert "Elapsed:            0m 0s" in result.output
        assert "Sync completed successfully!" in result.output

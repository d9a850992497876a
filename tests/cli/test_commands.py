"""Tests for the drillmap CLI commands and the TUI."""

import asyncio
import json

import pytest
from typer.testing import CliRunner

from drillmap import __version__
from drillmap.cli import app
from drillmap.cli.show import drill
from drillmap.cli.tui import build_app
from drillmap.config import DEFAULT_CONFIG

runner = CliRunner()


@pytest.fixture
def data_file(tmp_path, records):
    path = tmp_path / "items.json"
    path.write_text(json.dumps(records))
    return path


class TestSummary:
    def test_tree(self, data_file):
        result = runner.invoke(app, ["summary", str(data_file), "-g", "country", "-g", "set", "-w", "weight"])
        assert result.exit_code == 0, result.output
        assert "Togo" in result.stdout
        assert "180" in result.stdout
        assert "83.3%" in result.stdout

    def test_depth(self, data_file):
        result = runner.invoke(app, ["summary", str(data_file), "-g", "country", "-g", "set", "-d", "1"])
        assert result.exit_code == 0
        assert "Benin" in result.stdout
        assert " A " not in result.stdout

    def test_json(self, data_file):
        result = runner.invoke(
            app, ["summary", str(data_file), "-g", "country", "-g", "set", "-w", "weight", "--json"]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["aggregate"] == 180
        assert [c["key"] for c in payload["children"]] == ["Togo", "Benin"]
        assert payload["children"][0]["children"][0]["percent_of_parent"] == pytest.approx(66.67)
        assert payload["diagnostics"] == []


class TestShow:
    def test_root(self, data_file):
        result = runner.invoke(
            app,
            ["show", str(data_file), "-g", "country", "-g", "set", "-w", "weight", "--width", "60", "--height", "12"],
        )
        assert result.exit_code == 0, result.output
        assert "All" in result.stdout
        assert "Togo" in result.stdout
        assert "83.3%" in result.stdout

    def test_drill_path(self, data_file):
        result = runner.invoke(
            app,
            ["show", str(data_file), "-g", "country", "-g", "set", "-p", "Togo", "--width", "60"],
        )
        assert result.exit_code == 0, result.output
        assert "All › Togo" in result.stdout
        assert "50.0%" in result.stdout

    def test_unknown_path(self, data_file):
        result = runner.invoke(app, ["show", str(data_file), "-g", "country", "-p", "Ghana"])
        assert result.exit_code == 1
        assert "Ghana" in result.stdout

    def test_translations(self, data_file, tmp_path):
        labels = tmp_path / "labels.json"
        labels.write_text(json.dumps({"Benin": "Dahomey"}))
        result = runner.invoke(
            app, ["show", str(data_file), "-g", "country", "-t", str(labels), "--width", "60"]
        )
        assert result.exit_code == 0, result.output
        assert "Dahomey" in result.stdout

    def test_drill_helper(self, records):
        from drillmap import visualize

        coordinator = visualize(records, ["country", "set"])
        assert drill(coordinator, ["Togo", "A"]) == ["A"]
        assert coordinator.navigator.focus.key == "Togo"


class TestErrors:
    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["summary", str(tmp_path / "none.json"), "-g", "country"])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text('{"country": "Togo"}')
        result = runner.invoke(app, ["show", str(path), "-g", "country"])
        assert result.exit_code == 1
        assert "Cannot read records" in result.stdout

    def test_bad_config(self, data_file, tmp_path):
        config = tmp_path / "drillmap.toml"
        config.write_text("legend_max_items = -2\n")
        result = runner.invoke(app, ["summary", str(data_file), "-g", "country", "-c", str(config)])
        assert result.exit_code == 1

    def test_error_code_logged(self, data_file, tmp_path, caplog):
        config = tmp_path / "drillmap.toml"
        config.write_text("legend_max_items = -2\n")
        result = runner.invoke(app, ["summary", str(data_file), "-g", "country", "-c", str(config)])
        assert result.exit_code == 1
        assert any("InvalidConfigError [DM500]" in r.getMessage() for r in caplog.records)

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_browse_needs_terminal(self, data_file):
        result = runner.invoke(app, ["browse", str(data_file), "-g", "country"])
        assert result.exit_code == 1
        assert "interactive terminal" in result.stdout


class TestTreemapApp:
    def test_click_back_and_home(self, records):
        app_ = build_app(records, ["country", "set"], "weight", DEFAULT_CONFIG)
        coordinator = app_.coordinator

        async def scenario():
            async with app_.run_test(size=(100, 30)) as pilot:
                await pilot.pause()
                await pilot.click("#treemap", offset=(2, 2))
                await pilot.pause()
                assert coordinator.navigator.focus.key == "Togo"
                await pilot.press("escape")
                await pilot.pause()
                assert coordinator.navigator.at_root
                await pilot.click("#treemap", offset=(2, 2))
                await pilot.press("r")
                await pilot.pause()
                assert coordinator.navigator.at_root

        asyncio.run(scenario())

    def test_layout_matches_widget_size(self, records):
        app_ = build_app(records, ["country"], None, DEFAULT_CONFIG)

        async def scenario():
            async with app_.run_test(size=(90, 24)) as pilot:
                await pilot.pause(0.3)
                view = app_.query_one("#treemap")
                assert app_.coordinator.size == (view.size.width, view.size.height)

        asyncio.run(scenario())

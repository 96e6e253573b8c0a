import json

import pytest
from typer.testing import CliRunner

from checkhub.cli import EXIT_CHECK_FAILED, EXIT_LOAD_FAILED, app
from checkhub.hub import get_hub, reset_hub

runner = CliRunner()

CHECKS_MODULE = '''
from checkhub.hub import DataChecker, register


@register
class ItemChecker(DataChecker):
    name = "item"
    description = "positive prices"

    def check(self):
        for row in self.data:
            if row["price"] <= 0:
                raise ValueError(f"bad price in row {row['id']}")


@register
class HeroChecker(DataChecker):
    name = "hero"

    def check(self):
        if not self.data:
            raise ValueError("no heroes")
'''


@pytest.fixture(autouse=True)
def _fresh_hub():
    reset_hub()
    yield
    reset_hub()


@pytest.fixture
def checks_module(tmp_path, monkeypatch, request):
    """Write a checker module to disk and return its import name."""
    name = f"cli_checks_{request.node.name}"
    (tmp_path / f"{name}.py").write_text(CHECKS_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return name


def _data(tmp_path, items, heroes):
    data = tmp_path / "data"
    data.mkdir()
    (data / "item.json").write_text(json.dumps(items))
    (data / "hero.json").write_text(json.dumps(heroes))
    return data


def test_run_all_pass(tmp_path, checks_module):
    data = _data(tmp_path, [{"id": 1, "price": 2}], ["arthur"])
    report = tmp_path / "report.json"

    result = runner.invoke(app, ["run", str(data), "-m", checks_module, "--report", str(report)])

    assert result.exit_code == 0, result.output
    assert "All checks passed" in result.output
    saved = json.loads(report.read_text())
    assert saved["failures"] == []
    assert len(saved["results"]) == 4


def test_run_check_failure(tmp_path, checks_module):
    data = _data(tmp_path, [{"id": 1, "price": 0}], ["arthur"])

    result = runner.invoke(app, ["run", str(data), "-m", checks_module, "-b", "5"])

    assert result.exit_code == EXIT_CHECK_FAILED
    assert "Check failed count: 1" in result.output


def test_run_include_filter(tmp_path, checks_module):
    data = _data(tmp_path, [{"id": 1, "price": 0}], ["arthur"])

    result = runner.invoke(app, ["run", str(data), "-m", checks_module, "-i", "hero"])

    assert result.exit_code == 0, result.output
    assert list(get_hub().filtered_checker_map) == ["hero"]


def test_run_load_failure(tmp_path, checks_module):
    data = tmp_path / "empty"
    data.mkdir()

    result = runner.invoke(app, ["run", str(data), "-m", checks_module])

    assert result.exit_code == EXIT_LOAD_FAILED
    assert "Load failed" in result.output


def test_run_rewrite_must_be_pair(tmp_path, checks_module):
    result = runner.invoke(app, ["run", str(tmp_path), "-m", checks_module, "--rewrite", "nope"])
    assert result.exit_code != 0


def test_run_unknown_module(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["run", str(tmp_path), "-m", "no_such_checks_module"])
    assert result.exit_code == EXIT_LOAD_FAILED


def test_run_requires_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["run"])
    assert result.exit_code == EXIT_LOAD_FAILED


def test_list(tmp_path, checks_module):
    result = runner.invoke(app, ["list", "-m", checks_module])
    assert result.exit_code == 0, result.output
    assert "item" in result.output
    assert "hero" in result.output


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "checkhub v" in result.output


def test_run_unknown_log_level_is_config_error(tmp_path, monkeypatch):
    (tmp_path / "checkhub.yaml").write_text("log_level: loud\n")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["run", str(tmp_path)])

    assert result.exit_code == EXIT_LOAD_FAILED
    assert "Configuration error" in result.output


def test_run_format_from_config_file_any_case(tmp_path, checks_module):
    data = tmp_path / "data"
    data.mkdir()
    (data / "item.yaml").write_text("- {id: 1, price: 3}\n")
    (data / "hero.yaml").write_text("- arthur\n")
    (tmp_path / "checkhub.yaml").write_text("format: YAML\n")

    result = runner.invoke(app, ["run", str(data), "-m", checks_module])

    assert result.exit_code == 0, result.output

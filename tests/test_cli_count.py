from pathlib import Path

from typer.testing import CliRunner

from paramsweep.cli import app

runner = CliRunner()

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_cli_count():
    r = runner.invoke(app, ["count", str(EXAMPLES / "sweep.yaml")])
    assert r.exit_code == 0, r.output
    assert r.stdout.strip() == "8"


def test_cli_count_without_lists():
    r = runner.invoke(app, ["count", str(EXAMPLES / "single.json")])
    assert r.exit_code == 0, r.output
    assert r.stdout.strip() == "1"


def test_cli_count_empty_list(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("a: [1, 2]\nb: []\n", encoding="utf-8")

    r = runner.invoke(app, ["count", str(p)])
    assert r.exit_code == 0, r.output
    assert r.stdout.strip() == "0"


def test_cli_count_invalid_top_level(tmp_path: Path):
    p = tmp_path / "list.json"
    p.write_text("[1, 2]", encoding="utf-8")

    r = runner.invoke(app, ["count", str(p)])
    assert r.exit_code == 1
    assert "E_INVALID_TOP_LEVEL" in r.output


def test_cli_unknown_log_level():
    r = runner.invoke(app, ["--log-level", "loud", "count", str(EXAMPLES / "sweep.yaml")])
    assert r.exit_code == 2
    assert "E_UNKNOWN_LOG_LEVEL" in r.output

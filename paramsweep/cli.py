from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from paramsweep.core.errors import ParamExpansionError, ParamLoadError, SweepError
from paramsweep.core.expand.expand_params import expand, expanded_count, expansion_keys
from paramsweep.core.io.load_params import dump_params_text, dump_params_yaml, load_params
from paramsweep.core.logs import setup_logging
from paramsweep.core.naming.savename import savename
from paramsweep.core.provenance.repo import project_dir
from paramsweep.core.provenance.tag import current_commit, tag

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


@app.callback()
def _callback(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level for diagnostics (default: $PARAMSWEEP_LOG_LEVEL or WARNING)",
    ),
) -> None:
    """Parameter sweep CLI."""
    try:
        setup_logging(log_level)
    except ValueError as e:
        _print_errors([SweepError(code="E_UNKNOWN_LOG_LEVEL", message=str(e), path="log_level")])
        raise typer.Exit(code=2)


@app.command("count")
def count(
    path: str = typer.Argument(..., help="Path to a parameter file (.yaml/.yml/.json)"),
) -> None:
    """Print how many configurations a parameter file expands into."""
    params = _load_or_exit(path)
    try:
        n = expanded_count(params)
    except ParamExpansionError as e:
        _print_errors([_with_file(e, path)])
        raise typer.Exit(code=2)
    typer.echo(str(n))


@app.command("expand")
def expand_cmd(
    path: str = typer.Argument(..., help="Path to a parameter file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json|yaml"),
    out: str | None = typer.Option(None, "--out", help="Write the configurations as YAML here"),
    tag_runs: bool = typer.Option(
        False,
        "--tag/--no-tag",
        help="Add commit and script (the parameter file) to every configuration",
    ),
    repo: str | None = typer.Option(
        None,
        "--repo",
        help="Git repository used by --tag (default: project directory of PATH)",
    ),
) -> None:
    """Expand list-valued parameters into every combination."""
    if format not in ("text", "json", "yaml"):
        _print_errors(
            [
                SweepError(
                    code="E_EXPAND_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json, yaml)",
                    file=None,
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)

    params = _load_or_exit(path)
    try:
        runs = expand(params)
        varied = expansion_keys(params)
    except ParamExpansionError as e:
        _print_errors([_with_file(e, path)])
        raise typer.Exit(code=2)

    if tag_runs:
        gitpath = Path(repo).resolve() if repo else project_dir(str(Path(path).resolve().parent))
        script = Path(path).resolve()
        runs = [tag(run, gitpath, script) for run in runs]

    if out is not None:
        dump_params_yaml(runs, out)
        typer.echo(f"OK: wrote {len(runs)} configurations to {out}")
        return

    if format == "json":
        payload = {
            "tool": "paramsweep",
            "command": "expand",
            "count": len(runs),
            "varied": varied,
            "runs": runs,
        }
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    if format == "yaml":
        typer.echo(dump_params_text(runs), nl=False)
        return

    _print_table(runs, varied)
    typer.echo(f"{len(runs)} configurations ({', '.join(varied) or 'no varied parameters'})")


@app.command("names")
def names(
    path: str = typer.Argument(..., help="Path to a parameter file (.yaml/.yml/.json)"),
    suffix: str | None = typer.Option(None, "--suffix", help="Extension appended after a dot"),
    prefix: str | None = typer.Option(None, "--prefix", help="Prefix joined with the connector"),
    connector: str = typer.Option("_", "--connector", help="Separator between fields"),
    digits: int = typer.Option(3, "--digits", min=1, help="Significant digits for floats"),
) -> None:
    """Print a deterministic name for every expanded configuration."""
    params = _load_or_exit(path)
    try:
        runs = expand(params)
    except ParamExpansionError as e:
        _print_errors([_with_file(e, path)])
        raise typer.Exit(code=2)

    for run in runs:
        typer.echo(savename(run, suffix, prefix=prefix, digits=digits, connector=connector))


@app.command("commit")
def commit(
    repo: str | None = typer.Option(
        None, "--repo", help="Git repository (default: project directory)"
    ),
) -> None:
    """Print the current commit id (suffixed with _dirty for a dirty tree)."""
    gitpath = Path(repo) if repo else project_dir()
    label = current_commit(gitpath)
    if label is None:
        _print_errors(
            [
                SweepError(
                    code="E_NOT_A_REPOSITORY",
                    message="not a git repository",
                    file=str(gitpath),
                    path="repo",
                )
            ]
        )
        raise typer.Exit(code=1)
    typer.echo(label)


def _load_or_exit(path: str) -> dict[str, Any]:
    try:
        return load_params(path)
    except ParamLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)


def _with_file(e: SweepError, path: str) -> SweepError:
    return type(e)(code=e.code, message=e.message, file=e.file or path, path=e.path)


def _print_table(runs: list[dict[str, Any]], varied: list[str]) -> None:
    columns: list[str] = []
    for run in runs:
        for key in run:
            if key not in columns:
                columns.append(key)

    table = Table(title="paramsweep expand")
    table.add_column("#", justify="right")
    for key in columns:
        table.add_column(escape(f"{key}*" if key in varied else key))
    for i, run in enumerate(runs, start=1):
        table.add_row(str(i), *(escape(str(run.get(key, ""))) for key in columns))
    console.print(table)


def _print_errors(errors: list[SweepError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="paramsweep")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()

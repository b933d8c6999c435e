from contextlib import ExitStack
import json
from importlib.metadata import PackageNotFoundError, version as package_version
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

import typer

from deltapack.diff import (
    DiffError,
    RenderError,
    assert_documents,
    diff_documents,
    render_changes,
    render_summary,
)
from deltapack.diff.models import ChangeSet
from deltapack.document import DocumentError, read_document
from deltapack.plugins import PluginError, PluginManager, use_plugins_from_env

app = typer.Typer(help="TomlDelta CLI: structural diffs of TOML documents.")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    no_color: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()
_NO_COLOR_ENV_VAR = "NO_COLOR"


def _resolve_cli_version() -> str:
    try:
        return package_version("tomldelta")
    except PackageNotFoundError:
        from deltapack import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show TomlDelta version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI color output.",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.no_color = no_color
    _OUTPUT_OPTIONS.stable_json = stable_json


def _echo(message: str, *, err: bool = False, nl: bool = True) -> None:
    if _OUTPUT_OPTIONS.quiet and not err:
        return
    typer.echo(message, err=err, nl=nl, color=not _OUTPUT_OPTIONS.no_color)


def _echo_json(payload: dict[str, Any]) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
    else:
        rendered = json.dumps(payload, ensure_ascii=True, sort_keys=True, indent=2)
    typer.echo(rendered, color=False)


def _color_enabled(requested: bool) -> bool:
    if not requested or _OUTPUT_OPTIONS.no_color:
        return False
    return not os.getenv(_NO_COLOR_ENV_VAR, "").strip()


def _fail(command: str, error: Exception, *, json_output: bool, **context: Any) -> NoReturn:
    message = f"{command} failed: {error}"
    if json_output:
        _echo_json({"status": "error", "exit_code": 1, "message": message, **context})
    else:
        _echo(message, err=True)
    raise typer.Exit(code=1) from error


def _echo_report(change_set: ChangeSet, *, color: bool) -> None:
    # Report text already ends with a newline per line.
    report = render_changes(change_set, color=color)
    if report:
        _echo(report, nl=False)


def _activate_plugins(
    stack: ExitStack,
    command: str,
    *,
    json_output: bool,
    **context: Any,
) -> PluginManager:
    try:
        return stack.enter_context(use_plugins_from_env())
    except PluginError as error:
        _fail(command, error, json_output=json_output, **context)


def _plugin_payload(manager: PluginManager) -> dict[str, Any]:
    if not manager.diagnostics:
        return {}
    return {
        "plugin_diagnostics": [diagnostic.to_dict() for diagnostic in manager.diagnostics]
    }


@app.command()
def diff(
    new: Path = typer.Argument(..., help="Path to the new TOML document."),
    old: Path = typer.Argument(..., help="Path to the old TOML document."),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable change set output.",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Print per-status change counts after the report.",
    ),
    color: bool = typer.Option(
        False,
        "--color",
        help="Color added lines green and deleted lines red.",
    ),
) -> None:
    """Report keys added in NEW and deleted from OLD."""
    paths = {"new_path": str(new), "old_path": str(old)}
    with ExitStack() as stack:
        plugin_manager = _activate_plugins(stack, "diff", json_output=json_output, **paths)
        try:
            new_doc = read_document(new)
            old_doc = read_document(old)
            change_set = diff_documents(new_doc, old_doc)
        except (DocumentError, DiffError, OSError) as error:
            _fail("diff", error, json_output=json_output, **paths)

        if json_output:
            _echo_json(
                {
                    **change_set.to_dict(),
                    "status": "ok",
                    "exit_code": 0,
                    "message": "diff completed",
                    **paths,
                    **_plugin_payload(plugin_manager),
                }
            )
            return

        try:
            _echo_report(change_set, color=_color_enabled(color))
        except RenderError as error:
            if error.partial:
                _echo(error.partial, nl=False)
            _fail("diff", error, json_output=False)

        if summary:
            _echo(render_summary(change_set))


@app.command()
def check(
    new: Path = typer.Argument(..., help="Path to the candidate TOML document."),
    old: Path = typer.Argument(..., help="Path to the baseline TOML document."),
    ignore: list[str] = typer.Option(
        [],
        "--ignore",
        help="Dotted path whose differences are tolerated (repeatable).",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable check output.",
    ),
    color: bool = typer.Option(
        False,
        "--color",
        help="Color added lines green and deleted lines red.",
    ),
) -> None:
    """Fail when NEW differs from OLD outside the ignored paths."""
    paths = {"new_path": str(new), "old_path": str(old)}
    with ExitStack() as stack:
        plugin_manager = _activate_plugins(stack, "check", json_output=json_output, **paths)
        try:
            new_doc = read_document(new)
            old_doc = read_document(old)
            result = assert_documents(new_doc, old_doc, ignore_paths=ignore)
        except (DocumentError, DiffError, OSError) as error:
            _fail("check", error, json_output=json_output, **paths)

        if json_output:
            _echo_json({**result.to_dict(), **paths, **_plugin_payload(plugin_manager)})
            raise typer.Exit(code=result.exit_code)

        if result.passed:
            message = "check passed"
            if result.ignored:
                message += f" ({len(result.ignored)} ignored difference(s))"
            _echo(message)
            raise typer.Exit(code=0)

        try:
            _echo_report(ChangeSet(changes=list(result.violations)), color=_color_enabled(color))
        except RenderError as error:
            if error.partial:
                _echo(error.partial, nl=False)
            _fail("check", error, json_output=False)
        _echo(f"check failed: {len(result.violations)} difference(s)", err=True)
        raise typer.Exit(code=result.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

import json
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as package_version
import inspect
from typing import Any

import typer

from diffpack.core.exceptions import DiffError
from diffpack.core.policy import FieldSelectionPolicy, build_policy
from diffpack.diff import (
    AssertionResult,
    DiffReport,
    compare_instances,
    render_diff_summary,
    render_field_diffs,
)
from diffpack.entrypoints import EntrypointError, import_entrypoint
from diffpack.plugins import PluginError, env_plugin_manager, use_plugin_manager

app = typer.Typer(help="DiffKit CLI")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    no_color: bool = False
    stable_json: bool = True


@dataclass(frozen=True, slots=True)
class _DiffRequest:
    left: str
    right: str
    policy: FieldSelectionPolicy
    climb_level: int


_OUTPUT_OPTIONS = _OutputOptions()


def _resolve_cli_version() -> str:
    try:
        return package_version("diffkit")
    except PackageNotFoundError:
        from diffkit import __version__ as local_version

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
        help="Show DiffKit version and exit.",
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


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err, color=not _OUTPUT_OPTIONS.no_color)


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    # Field values are arbitrary objects; anything JSON can't encode is repr'd.
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
            default=repr,
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
            default=repr,
        )
    typer.echo(rendered, err=err, color=not _OUTPUT_OPTIONS.no_color)


def _fail(command: str, message: str, *, json_output: bool, exit_code: int = 1) -> typer.Exit:
    full_message = f"{command} failed: {message}"
    if json_output:
        _echo_json({"status": "error", "exit_code": exit_code, "message": full_message})
    else:
        _echo(full_message, err=True)
    return typer.Exit(code=exit_code)


def _load_instance(reference: str) -> Any:
    """Resolve ``module:attribute``; plain functions are called without arguments."""
    target = import_entrypoint(reference)
    if inspect.isfunction(target):
        return target()
    return target


def _build_request(
    command: str,
    *,
    left: str,
    right: str,
    only: list[str] | None,
    exclude: list[str] | None,
    climb: int,
    json_output: bool,
) -> _DiffRequest:
    try:
        policy = build_policy(only=only or None, exclude=exclude or None)
    except ValueError as error:
        raise _fail(command, str(error), json_output=json_output, exit_code=2) from error
    return _DiffRequest(left=left, right=right, policy=policy, climb_level=climb)


def _run_diff(command: str, request: _DiffRequest, *, json_output: bool) -> DiffReport:
    try:
        first = _load_instance(request.left)
        second = _load_instance(request.right)
    except EntrypointError as error:
        raise _fail(command, str(error), json_output=json_output) from error

    # Unlike library calls, the CLI refuses to run with a broken plugin config.
    try:
        plugin_manager = env_plugin_manager()
    except PluginError as error:
        raise _fail(command, str(error), json_output=json_output) from error

    try:
        with use_plugin_manager(plugin_manager):
            return compare_instances(
                first,
                second,
                policy=request.policy,
                climb_level=request.climb_level,
            )
    except DiffError as error:
        raise _fail(command, str(error), json_output=json_output) from error


_ONLY_OPTION = typer.Option(
    None,
    "--only",
    help="Compare only this field name (repeatable).",
)
_EXCLUDE_OPTION = typer.Option(
    None,
    "--exclude",
    help="Skip this field name (repeatable).",
)
_CLIMB_OPTION = typer.Option(
    -1,
    "--climb",
    help="Ancestor levels to include: -1 for all, 0 for the dynamic type only.",
)
_JSON_OPTION = typer.Option(
    False,
    "--json",
    help="Emit machine-readable output.",
)
_MAX_CHANGES_OPTION = typer.Option(
    8,
    "--max-changes",
    help="Maximum number of field differences to print in text mode.",
)


@app.command()
def diff(
    left: str = typer.Argument(..., help="First instance as module:attribute."),
    right: str = typer.Argument(..., help="Second instance as module:attribute."),
    only: list[str] | None = _ONLY_OPTION,
    exclude: list[str] | None = _EXCLUDE_OPTION,
    climb: int = _CLIMB_OPTION,
    json_output: bool = _JSON_OPTION,
    max_changes: int = _MAX_CHANGES_OPTION,
) -> None:
    """Diff two instances field by field."""
    request = _build_request(
        "diff",
        left=left,
        right=right,
        only=only,
        exclude=exclude,
        climb=climb,
        json_output=json_output,
    )
    report = _run_diff("diff", request, json_output=json_output)

    if json_output:
        _echo_json(
            {
                **report.to_dict(),
                "status": "ok",
                "exit_code": 0,
                "message": "diff completed",
                "left": left,
                "right": right,
                "policy": request.policy.to_dict(),
                "climb_level": request.climb_level,
            }
        )
        return

    _echo(render_diff_summary(report.result))
    _echo(render_field_diffs(report.result, max_changes=max_changes))


@app.command(name="assert")
def assert_instances(
    left: str = typer.Argument(..., help="Expected instance as module:attribute."),
    right: str = typer.Argument(..., help="Actual instance as module:attribute."),
    only: list[str] | None = _ONLY_OPTION,
    exclude: list[str] | None = _EXCLUDE_OPTION,
    climb: int = _CLIMB_OPTION,
    json_output: bool = _JSON_OPTION,
    max_changes: int = _MAX_CHANGES_OPTION,
) -> None:
    """Exit non-zero when two instances differ in a compared field."""
    request = _build_request(
        "assert",
        left=left,
        right=right,
        only=only,
        exclude=exclude,
        climb=climb,
        json_output=json_output,
    )
    report = _run_diff("assert", request, json_output=json_output)
    result = AssertionResult(
        diff=report.result,
        policy=request.policy,
        climb_level=request.climb_level,
        outcome=report.outcome,
    )

    if json_output:
        _echo_json({**result.to_dict(), "left": left, "right": right})
    elif result.passed:
        _echo(f"assert passed: left={left} right={right}")
    else:
        _echo(f"assert failed: differences detected (left={left} right={right})", force=True)
        _echo(result.render(max_changes=max_changes), force=True)

    if not result.passed:
        raise typer.Exit(code=result.exit_code)


def main() -> None:
    app()

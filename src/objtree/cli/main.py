"""
Main CLI entry point for objtree.

Provides the command-line interface using Click. Every command reads a
JSON or YAML document, applies one tree operation and writes the result
to stdout (or back to the file with --in-place).
"""

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic

import objtree
import objtree.config as config
import objtree.config.sources as config_sources
import objtree.constants as constants
import objtree.errors as errors
import objtree.io as io
import objtree.tree as tree

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_LOGGING_CONFIGURED = False

# Marker for a path that get_path could not resolve
_NOT_FOUND = object()


def _configure_logging(level: str) -> None:
    """Attach a stderr handler once and set the package log level."""
    global _LOGGING_CONFIGURED
    if not _LOGGING_CONFIGURED:
        _logging.basicConfig(format=constants.LOG_FORMAT, stream=_sys.stderr)
        _LOGGING_CONFIGURED = True
    _logging.getLogger("objtree").setLevel(level)


def _should_use_color(cli_flag: bool | None, configured: bool | None) -> tuple[bool, bool]:
    """Determine whether to use color output.

    Priority:
    1. CLI flag (--color / --no-color) if specified
    2. output.color from config
    3. NO_COLOR env var (if set, disable color)
    4. Auto-detect: color if stdout is a TTY

    Returns:
        Tuple of (color_enabled, force_color).
        force_color is True when color was explicitly requested (not auto-detected).
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)
    if configured is not None:
        return (configured, configured)
    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)
    return (_sys.stdout.isatty(), False)


def _print_document(text: str, fmt: str, *, color: bool = True, force_color: bool = False) -> None:
    """Print document text, optionally with syntax highlighting.

    Args:
        text: The serialized document
        fmt: "json" or "yaml" (selects the lexer)
        color: Whether to use syntax highlighting
        force_color: Force color even when not a TTY (for piping with --color)
    """
    if color:
        import rich.console as _rich_console
        import rich.syntax as _rich_syntax

        console = _rich_console.Console(
            force_terminal=force_color,
            no_color=False if force_color else None,
            color_system="truecolor" if force_color else "auto",
        )
        syntax = _rich_syntax.Syntax(
            text.rstrip("\n"),
            fmt,
            theme="monokai",
            background_color="default",
        )
        console.print(syntax)
        return

    _click.echo(text, nl=not text.endswith("\n"))


def _emit(ctx: _click.Context, value: _typing.Any) -> None:
    """Serialize a value with the active output settings and print it."""
    settings: config.Settings = ctx.obj["settings"]
    fmt = ctx.obj["format"] or settings.output.format
    try:
        text = io.dump_document(
            value,
            fmt,
            indent=settings.output.indent,
            sort_keys=settings.output.sort_keys,
        )
    except errors.DocumentError as e:
        raise _click.ClickException(str(e)) from e
    color, force_color = _should_use_color(ctx.obj["color"], settings.output.color)
    _print_document(text, fmt, color=color, force_color=force_color)


def _load(source: str) -> _typing.Any:
    """Load a document, converting errors into click errors."""
    try:
        return io.load_document(source)
    except errors.DocumentError as e:
        raise _click.ClickException(str(e)) from e


def _parse_json_argument(text: str, name: str) -> _typing.Any:
    """Parse a JSON command-line value."""
    try:
        return _json.loads(text)
    except _json.JSONDecodeError as e:
        raise _click.BadParameter(
            f"not valid JSON ({e.msg}); quote strings or use --string",
            param_hint=name,
        ) from e


def _write_back(ctx: _click.Context, source: str, value: _typing.Any) -> None:
    """Write a modified document back to its file."""
    if source == constants.STDIN_MARKER:
        raise _click.UsageError("--in-place cannot be used with stdin")
    settings: config.Settings = ctx.obj["settings"]
    try:
        io.write_document(
            value,
            source,
            indent=settings.output.indent,
            sort_keys=settings.output.sort_keys,
        )
    except errors.DocumentError as e:
        raise _click.ClickException(str(e)) from e
    _logger.info("Updated %s", source)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(objtree.__version__, "-v", "--version", prog_name="objtree")
@_click.option("-V", "--verbose", is_flag=True, help="Enable debug logging on stderr")
@_click.option(
    "-f",
    "--format",
    "output_format",
    type=_click.Choice(["json", "yaml"]),
    default=None,
    help="Output format (default: output.format from config)",
)
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
def cli(
    ctx: _click.Context,
    verbose: bool,
    output_format: str | None,
    use_color: bool | None,
) -> None:
    """objtree - query, edit, merge and clean JSON/YAML documents.

    FILE arguments accept "-" for standard input. Paths are dot-separated
    ("servers.0.host"); array elements are addressed by index.
    """
    try:
        settings = config.Settings()
    except errors.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"Invalid configuration:\n{e}") from e

    _configure_logging("DEBUG" if verbose else settings.log_level)
    unknown = settings.collect_unknown_keys()
    if unknown:
        _logger.warning("Unknown config keys: %s", ", ".join(sorted(unknown)))

    ctx.obj = {"settings": settings, "format": output_format, "color": use_color}


@cli.command(name="get")
@_click.argument("source", metavar="FILE")
@_click.argument("path")
@_click.option("--default", "default_json", default=None, help="JSON value printed when missing")
@_click.option("--raw", is_flag=True, help="Print string results without quotes")
@_click.pass_context
def get_cmd(
    ctx: _click.Context,
    source: str,
    path: str,
    default_json: str | None,
    raw: bool,
) -> None:
    """Print the value at PATH.

    Exits with status 1 when the path does not exist and no --default is given.

    Examples:
        objtree get config.json server.port
        objtree get config.yaml servers.0.host --raw
    """
    document = _load(source)
    value = tree.get_path(document, path, _NOT_FOUND)
    if value is _NOT_FOUND:
        if default_json is None:
            _click.echo(f"Path not found: {path}", err=True)
            ctx.exit(1)
        value = _parse_json_argument(default_json, "--default")

    if raw and isinstance(value, str):
        _click.echo(value)
        return
    _emit(ctx, value)


@cli.command(name="has")
@_click.argument("source", metavar="FILE")
@_click.argument("path")
@_click.pass_context
def has_cmd(ctx: _click.Context, source: str, path: str) -> None:
    """Check whether PATH exists. Prints true/false; exit status 0/1."""
    found = tree.has_path(_load(source), path)
    _click.echo("true" if found else "false")
    if not found:
        ctx.exit(1)


@cli.command(name="set")
@_click.argument("source", metavar="FILE")
@_click.argument("path")
@_click.argument("value")
@_click.option("--string", "as_string", is_flag=True, help="Store VALUE as a string, not JSON")
@_click.option("-i", "--in-place", is_flag=True, help="Write the result back to FILE")
@_click.pass_context
def set_cmd(
    ctx: _click.Context,
    source: str,
    path: str,
    value: str,
    as_string: bool,
    in_place: bool,
) -> None:
    """Set PATH to VALUE, creating intermediate objects.

    VALUE is parsed as JSON unless --string is given.

    Examples:
        objtree set config.json server.port 8080
        objtree set config.yaml server.name web-1 --string -i
    """
    document = _load(source)
    if not tree.is_container(document):
        raise _click.ClickException("Document root is not an object or array")

    new_value = value if as_string else _parse_json_argument(value, "VALUE")
    tree.set_path(document, path, new_value)
    _logger.debug("Set %s in %s", path, source)

    if in_place:
        _write_back(ctx, source, document)
    else:
        _emit(ctx, document)


@cli.command(name="delete")
@_click.argument("source", metavar="FILE")
@_click.argument("path")
@_click.option("-i", "--in-place", is_flag=True, help="Write the result back to FILE")
@_click.pass_context
def delete_cmd(ctx: _click.Context, source: str, path: str, in_place: bool) -> None:
    """Remove the key or array element at PATH. Missing paths are ignored."""
    document = _load(source)
    tree.delete_path(document, path)
    _logger.debug("Deleted %s in %s", path, source)

    if in_place:
        _write_back(ctx, source, document)
    else:
        _emit(ctx, document)


@cli.command(name="merge")
@_click.argument("sources", metavar="FILE...", nargs=-1, required=True)
@_click.option(
    "--array-merge",
    type=_click.Choice(["concat", "replace"]),
    default=None,
    help="How arrays under the same key combine (default: merge.array_merge from config)",
)
@_click.pass_context
def merge_cmd(ctx: _click.Context, sources: tuple[str, ...], array_merge: str | None) -> None:
    """Deep merge documents left to right; later files win.

    Objects merge key by key, arrays concatenate, anything else is replaced.

    Examples:
        objtree merge defaults.yaml site.yaml local.yaml
        objtree merge a.json b.json --array-merge replace
    """
    settings: config.Settings = ctx.obj["settings"]
    options = settings.merge.to_options(array_merge)
    documents = [_load(source) for source in sources]
    _emit(ctx, tree.merge_all(*documents, options=options))


@cli.command(name="clean")
@_click.argument("source", metavar="FILE")
@_click.option("-k", "--clean-key", "clean_keys", multiple=True, help="Key to always remove")
@_click.option(
    "--clean-value",
    "clean_values",
    multiple=True,
    help="JSON value to always remove (e.g. '0', '\"n/a\"')",
)
@_click.option("--keep-empty-objects", is_flag=True, help="Keep empty objects")
@_click.option("--keep-empty-arrays", is_flag=True, help="Keep empty arrays")
@_click.option("--keep-empty-strings", is_flag=True, help="Keep empty strings")
@_click.option("--keep-null", is_flag=True, help="Keep null values")
@_click.option("--nan", "remove_nan", is_flag=True, help="Remove NaN values")
@_click.option("--trim", is_flag=True, help="Strip whitespace from strings before checking")
@_click.pass_context
def clean_cmd(
    ctx: _click.Context,
    source: str,
    clean_keys: tuple[str, ...],
    clean_values: tuple[str, ...],
    keep_empty_objects: bool,
    keep_empty_arrays: bool,
    keep_empty_strings: bool,
    keep_null: bool,
    remove_nan: bool,
    trim: bool,
) -> None:
    """Remove empty and unwanted values recursively.

    Defaults come from the clean section of the config; flags override them.

    Examples:
        objtree clean data.json
        objtree clean data.yaml -k password -k token --trim
    """
    settings: config.Settings = ctx.obj["settings"]

    overrides: dict[str, _typing.Any] = {}
    if clean_keys:
        overrides["clean_keys"] = [*settings.clean.clean_keys, *clean_keys]
    if clean_values:
        parsed = [_parse_json_argument(v, "--clean-value") for v in clean_values]
        overrides["clean_values"] = [*settings.clean.clean_values, *parsed]
    if keep_empty_objects:
        overrides["empty_objects"] = False
    if keep_empty_arrays:
        overrides["empty_arrays"] = False
    if keep_empty_strings:
        overrides["empty_strings"] = False
    if keep_null:
        overrides["null_values"] = False
    if remove_nan:
        overrides["nan_values"] = True
    if trim:
        overrides["transform"] = _trim_strings

    options = settings.clean.to_options(**overrides)
    _emit(ctx, tree.clean(_load(source), options))


def _trim_strings(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> _typing.Any:
    """Transform for --trim: strip surrounding whitespace from strings."""
    del key, container
    return value.strip() if isinstance(value, str) else value


@cli.command(name="flat-keys")
@_click.argument("source", metavar="FILE")
def flat_keys_cmd(source: str) -> None:
    """List the dotted path of every leaf value, one per line."""
    document = _load(source)
    if not tree.is_plain_mapping(document):
        raise _click.ClickException("Document root is not an object")
    for key in tree.flat_keys(document):
        _click.echo(key)


@cli.group(name="config")
def config_cmd() -> None:
    """Configuration management commands."""


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option("--section", type=str, default=None, help="Show specific section only")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool, section: str | None) -> None:
    """Show effective configuration from all sources."""
    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.model_dump(mode="json")

    if section:
        if section not in full_config:
            raise _click.ClickException(f"Unknown section: {section}")
        full_config = {section: full_config[section]}

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
        return

    yaml_text = io.dump_document(full_config, "yaml")
    color, force_color = _should_use_color(ctx.obj["color"], settings.output.color)
    _print_document(yaml_text, "yaml", color=color, force_color=force_color)


@config_cmd.command(name="path")
def config_path() -> None:
    """Show config file locations, highest precedence first."""
    layers = [
        ("project", config_sources.get_project_config_path(_pathlib.Path.cwd())),
        ("user", config_sources.get_user_config_path()),
        ("built-in", config_sources.get_builtin_defaults_path()),
    ]
    for name, path in layers:
        marker = "✓" if path.exists() else "✗"
        _click.echo(f"{marker} {name}: {path}")


def main() -> None:
    """Console script entry point."""
    cli()

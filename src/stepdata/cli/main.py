"""
Main CLI entry point for stepdata.

Provides the command-line interface using Click: parse a typed step
argument, resolve a path inside a data file, or inspect the effective
configuration.
"""

import json as _json
import pathlib as _pathlib
import typing as _typing

import click as _click
import rich.pretty as _rich_pretty
import yaml as _yaml

import stepdata
import stepdata.config as config
import stepdata.logging as logging
import stepdata.parsing as parsing
import stepdata.utils as utils

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _validate_log_level(
    ctx: _click.Context,  # noqa: ARG001 - required by click callback interface
    param: _click.Parameter,  # noqa: ARG001
    value: str | None,
) -> str | None:
    if value is None:
        return None
    try:
        logging.parse_level(value)
    except ValueError as e:
        raise _click.BadParameter(str(e)) from None
    return value


def _load_data_file(path: _pathlib.Path) -> _typing.Any:
    """Load a YAML (or JSON) data file."""
    try:
        return _yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise _click.ClickException(f"Cannot read {path}: {e}") from e
    except _yaml.YAMLError as e:
        raise _click.ClickException(f"Invalid data in {path}: {e}") from e


def _echo_value(value: _typing.Any, *, as_json: bool) -> None:
    """Print a result as JSON, or as a Python repr (strings unquoted)."""
    if as_json:
        _click.echo(_json.dumps(value, indent=2, default=str))
    elif isinstance(value, str):
        _click.echo(value)
    else:
        _click.echo(_rich_pretty.pretty_repr(value))


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(stepdata.__version__, "-v", "--version", prog_name="stepdata")
@_click.option(
    "--log-level",
    type=str,
    default=None,
    callback=_validate_log_level,
    help="Console log level: trace, debug, info, log, warn, error (or 0-5)",
)
@_click.pass_context
def cli(ctx: _click.Context, log_level: str | None) -> None:
    """
    stepdata - typed step arguments and path lookups.

    \b
    Examples:
        stepdata parse int:3.5                       # 4
        stepdata parse config:db.port --config c.yaml
        stepdata resolve "users[0].name" --file data.json
        stepdata config show --json
    """
    try:
        settings = config.Settings()
    except config.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e

    logging.configure_logging(log_level if log_level is not None else settings.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command(name="parse")
@_click.argument("value")
@_click.option(
    "--config",
    "config_file",
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="YAML/JSON file used as the config collection (default: the 'world' config section)",
)
@_click.option(
    "--state",
    "state_file",
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="YAML/JSON file used as the state collection",
)
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def parse_cmd(
    ctx: _click.Context,
    value: str,
    config_file: _pathlib.Path | None,
    state_file: _pathlib.Path | None,
    as_json: bool,
) -> None:
    """Parse a typed argument such as int:42 or config:db.port."""
    settings: config.Settings = ctx.obj["settings"]

    config_data = _load_data_file(config_file) if config_file else settings.world
    state_data = _load_data_file(state_file) if state_file else None

    parser = parsing.StringArgParser(
        state_data,
        config_data,
        max_depth=settings.parsing.max_depth,
    )
    try:
        result = parser.parse(value)
    except ValueError as e:
        # JSONDecodeError and ParseDepthError are both ValueErrors
        raise _click.ClickException(f"Cannot parse {value!r}: {e}") from e

    _echo_value(result, as_json=as_json)


@cli.command(name="resolve")
@_click.argument("path")
@_click.option(
    "--file",
    "data_file",
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="YAML/JSON file to look in (default: the 'world' config section)",
)
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def resolve_cmd(
    ctx: _click.Context,
    path: str,
    data_file: _pathlib.Path | None,
    as_json: bool,
) -> None:
    """Look up a dot/bracket PATH such as users[0].name."""
    settings: config.Settings = ctx.obj["settings"]

    data = _load_data_file(data_file) if data_file else settings.world
    _echo_value(utils.resolve(data, path), as_json=as_json)


@cli.group()
def config_cmd() -> None:
    """Configuration commands."""


# Register config_cmd with the name "config" to avoid shadowing the module
cli.add_command(config_cmd, name="config")


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option("--section", type=str, default=None, help="Show specific section only")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool, section: str | None) -> None:
    """Show effective configuration from all sources.

    \b
    Examples:
        stepdata config show                    # YAML
        stepdata config show --json             # JSON
        stepdata config show --section parsing  # One section
    """
    settings: config.Settings = ctx.obj["settings"]

    full_config = settings.model_dump(mode="json")

    if section:
        if section not in full_config:
            raise _click.ClickException(f"Unknown section: {section}")
        full_config = {section: full_config[section]}

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
    else:
        _click.echo(_yaml.safe_dump(full_config, default_flow_style=False, sort_keys=False), nl=False)

    extra = settings.get_extra_fields()
    if extra:
        _click.echo(f"Unknown config keys: {', '.join(sorted(extra))}", err=True)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="stepdata")


if __name__ == "__main__":
    main()

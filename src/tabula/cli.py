"""Tabula CLI interface.

Commands:
- render: Render a template through the Tabula buffer
- validate: Validate a Jinja2 template
- init: Initialize Tabula configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from tabula import __version__
from tabula.config import TabulaConfig, create_default_config, load_config
from tabula.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="tabula",
    help="Render indentation-sensitive templates with buffer capture helpers",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: TabulaConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"tabula {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Tabula - indentation-aware template rendering."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


# =============================================================================
# render command
# =============================================================================


def _parse_vars(pairs: list[str]) -> dict[str, str]:
    """Parse KEY=VALUE pairs into a dictionary.

    Raises:
        typer.BadParameter: If a pair has no '='
    """
    variables: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got: {pair}")
        variables[key] = value
    return variables


@app.command()
def render(
    template: Annotated[
        Path,
        typer.Argument(
            help="Path to the template to render",
            exists=True,
            dir_okay=False,
        ),
    ],
    var: Annotated[
        list[str] | None,
        typer.Option(
            "--var",
            help="Template variable as KEY=VALUE (repeatable)",
        ),
    ] = None,
    vars_file: Annotated[
        Path | None,
        typer.Option(
            "--vars-file",
            help="YAML file with template variables",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write output to this file instead of stdout",
        ),
    ] = None,
) -> None:
    """Render a template.

    The template's directory is searched before the configured search path,
    so partials next to the template resolve by name.

    Exit codes:
        0: Rendered successfully
        1: Error while loading or rendering
    """
    from jinja2 import FileSystemLoader, TemplateError

    from tabula.templates import TemplateRenderer

    config = _config or TabulaConfig()

    variables: dict[str, Any] = {}
    if vars_file is not None:
        try:
            data = yaml.safe_load(vars_file.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            _logger.error(f"Invalid variables file {vars_file}: {e}")
            raise typer.Exit(1)
        if not isinstance(data, dict):
            _logger.error(f"Variables file must contain a mapping: {vars_file}")
            raise typer.Exit(1)
        variables.update(data)
    variables.update(_parse_vars(var or []))

    search_path = [str(template.parent), *config.templates.search_path]
    renderer = TemplateRenderer(config=config, loader=FileSystemLoader(search_path))

    _logger.info(f"Rendering template: {template}")

    try:
        if output is not None:
            written = renderer.render_to_file(template.name, output, **variables)
            typer.echo(f"Rendered output written to: {written}")
        else:
            rendered = renderer.render(template.name, **variables)
            typer.echo(rendered, nl=False)
    except (TemplateError, ValueError) as e:
        _logger.error(f"Rendering failed: {e}")
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Rendering failed: {type(e).__name__}: {e}")
        raise typer.Exit(1)

    _logger.structured(logging.DEBUG, "render complete", template=str(template))


# =============================================================================
# validate command
# =============================================================================


@app.command()
def validate(
    template: Annotated[
        Path,
        typer.Argument(
            help="Path to Jinja2 template to validate",
            exists=True,
            dir_okay=False,
        ),
    ],
) -> None:
    """Validate a Jinja2 template.

    Checks syntax with the same extensions the renderer enables.
    """
    from jinja2 import TemplateSyntaxError

    from tabula.templates import TemplateRenderer

    _logger.info(f"Validating template: {template}")

    try:
        env = TemplateRenderer(config=_config).environment
        env.parse(template.read_text(encoding="utf-8"))
    except TemplateSyntaxError as e:
        _logger.error(f"Template syntax error: {e.message}")
        typer.echo(f"Template syntax error at line {e.lineno}: {e.message}")
        raise typer.Exit(1)

    _logger.info("Template syntax is valid")
    typer.echo(f"Template is valid: {template}")


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize Tabula configuration.

    Creates .tabula/config.yaml with default settings and an empty
    templates directory.
    """
    tabula_dir = Path(".tabula")
    tabula_dir.mkdir(exist_ok=True)

    config_file = tabula_dir / "config.yaml"
    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    templates_dir = Path("templates")
    templates_dir.mkdir(exist_ok=True)

    typer.echo("Tabula configuration initialized")
    typer.echo(f"   Config: {config_file}")
    typer.echo(f"   Templates: {templates_dir}/")


if __name__ == "__main__":
    app()

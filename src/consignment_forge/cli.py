# src/consignment_forge/cli.py
"""consignment-forge Command Line Interface.

Usage:
    consignment-forge decode consignment.rgb ./exploded
    consignment-forge encode ./exploded rebuilt.rgb
    consignment-forge attack consignment.rgb chain --output-dir ./attacks
    consignment-forge attacks
    consignment-forge inspect consignment.rgb
    consignment-forge show-config --config forge.yaml
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import pydantic
import typer
import yaml

from consignment_forge import __version__
from consignment_forge.contracts.errors import ConsignmentError
from consignment_forge.core.config import ForgeSettings, load_settings

__all__ = ["app"]

app = typer.Typer(
    name="consignment-forge",
    help="consignment-forge: explode, rebuild and attack consignment streams.",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to YAML configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"consignment-forge version {__version__}")
        raise typer.Exit()


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


def _load_settings_or_exit(config_file: Path | None, overrides: dict[str, Any] | None = None) -> ForgeSettings:
    try:
        return load_settings(config_file=config_file, overrides=overrides)
    except FileNotFoundError as e:
        raise _fail(str(e)) from e
    except (pydantic.ValidationError, yaml.YAMLError, ValueError) as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """consignment-forge: explode, rebuild and attack consignment streams."""
    from consignment_forge.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")


@app.command()
def decode(
    src: Annotated[Path, typer.Argument(help="Binary consignment to explode.", exists=True, dir_okay=False)],
    dst: Annotated[Path, typer.Argument(help="Directory to write the exploded tree into.", file_okay=False)],
) -> None:
    """Explode a consignment into one YAML file per record."""
    from consignment_forge.core.decoder import explode_consignment

    try:
        summary = explode_consignment(src, dst)
    except ConsignmentError as e:
        raise _fail(str(e)) from e

    typer.secho(f"Decoded consignment for {summary.contract_id} into '{dst}'", fg=typer.colors.GREEN)
    typer.echo(f"  {summary.operations} operations, {summary.seals} seals, {summary.witnesses} witnesses")


@app.command()
def encode(
    src_dir: Annotated[Path, typer.Argument(help="Exploded consignment tree.", exists=True, file_okay=False)],
    dst: Annotated[Path, typer.Argument(help="Binary consignment to write.", dir_okay=False)],
) -> None:
    """Rebuild a binary consignment from an exploded tree."""
    from consignment_forge.core.encoder import rebuild_consignment

    try:
        summary = rebuild_consignment(src_dir, dst)
    except ConsignmentError as e:
        raise _fail(str(e)) from e

    typer.secho(f"Rebuilt consignment from {src_dir} to {dst}", fg=typer.colors.GREEN)
    typer.echo(f"  Contract: {summary.contract_id}")
    typer.echo(f"  {summary.operations} operations, {summary.seals} seals, {summary.witnesses} witnesses, {summary.size} bytes")


@app.command()
def attack(
    src: Annotated[Path, typer.Argument(help="Well-formed source consignment.", exists=True, dir_okay=False)],
    name: Annotated[str, typer.Argument(help="Attack name. Use 'consignment-forge attacks' to list.")],
    config_file: ConfigOption = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for the attacked artifact.", file_okay=False),
    ] = None,
    scratch_root: Annotated[
        Path | None,
        typer.Option("--scratch-root", help="Directory holding per-attack scratch trees.", file_okay=False),
    ] = None,
) -> None:
    """Generate an attacked consignment for validator negative tests."""
    from consignment_forge.testing.attacks import create_attack_consignment

    overrides: dict[str, Any] = {}
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    if scratch_root is not None:
        overrides["scratch_root"] = scratch_root
    settings = _load_settings_or_exit(config_file, overrides)

    try:
        artifact = create_attack_consignment(src, name, settings=settings)
    except ConsignmentError as e:
        raise _fail(str(e)) from e

    typer.secho(f"Created attack consignment at {artifact}", fg=typer.colors.GREEN)


@app.command()
def attacks() -> None:
    """List available attacks."""
    from consignment_forge.testing.attacks import list_attacks

    typer.secho("Available attacks:", fg=typer.colors.GREEN)
    for spec in list_attacks():
        marker = " (verbatim)" if spec.is_verbatim else ""
        typer.echo(f"  - {spec.name}{marker}: {spec.description}")

    typer.echo()
    typer.echo("Use with: consignment-forge attack <consignment> <name>")


@app.command()
def inspect(
    src: Annotated[Path, typer.Argument(help="Binary consignment.", exists=True, dir_okay=False)],
) -> None:
    """Show the header of a consignment without decoding its body."""
    from consignment_forge.core.decoder import read_consignment_header

    try:
        header = read_consignment_header(src)
    except ConsignmentError as e:
        raise _fail(str(e)) from e

    typer.echo(f"Version: {header.version}")
    typer.echo(f"Contract: {header.contract_id_hex}")


@app.command()
def show_config(
    config_file: ConfigOption = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json or yaml."),
    ] = "yaml",
) -> None:
    """Show the effective configuration."""
    settings = _load_settings_or_exit(config_file)
    config_dict = settings.model_dump(mode="json")
    if output_format == "json":
        typer.echo(json.dumps(config_dict, indent=2))
    else:
        typer.echo(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    app()

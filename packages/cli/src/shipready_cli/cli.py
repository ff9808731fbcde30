"""CLI entry point for shipready.

Commands:
  to-deploy  — list commits not yet deployed to an environment, with ticket readiness
  doctor     — placeholder for ticket status checks
"""

from __future__ import annotations

import dataclasses
import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from shipready_cli.commands.doctor import doctor_cmd
from shipready_cli.commands.to_deploy import to_deploy_cmd

err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("shipready"),
    prog_name="shipready",
)
@click.option(
    "--config",
    "config_path",
    default=".shipready.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="SHIPREADY_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Show which commits are waiting to be deployed and whether their tickets are ready."""
    from shipready_core.config import load_config
    from shipready_core.errors import ConfigError
    from shipready_cli.auth import resolve_github_token

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e))

    # Resolve token once so all subcommands share the same resolution.
    token = resolve_github_token(config.github_server)
    if token:
        config = dataclasses.replace(config, github_token=token)

    ctx.obj["config"] = config


main.add_command(to_deploy_cmd)
main.add_command(doctor_cmd)

"""doctor command — placeholder for finding tickets in the wrong status."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.command("doctor")
@click.option("--project", "-p", required=True, help="Project name.")
@click.option("--author", "-a", required=True, help="Author whose tickets should be checked.")
def doctor_cmd(project: str, author: str):
    """Check tickets for PROJECT. Not implemented yet."""
    console.print(f"Checking project: {project}", markup=False, highlight=False)
    console.print("[yellow]doctor checks are not implemented yet.[/yellow]")

"""to-deploy command — report commits waiting to be deployed and their ticket readiness."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from shipready_core.errors import ConfigError, ShipreadyError, UnknownProjectError
from shipready_core.presenter import print_report
from shipready_core.readiness import build_engine

console = Console()
err_console = Console(stderr=True)


@click.command("to-deploy")
@click.option("--owner", "-o", required=True, help="GitHub organisation that owns the project repository.")
@click.option("--project", "-p", required=True, help="Project name; also the service and repository name.")
@click.option("--env", "-e", required=True, help="Environment to compare against, e.g. prod.")
@click.option("--author", "-a", default=None, help="Only show commits by this author (handle or email).")
@click.option("--cluster", "-c", default=None, help="Cluster name. Switches to the per-cluster config layout.")
@click.option(
    "--container",
    default=None,
    help="Container name in the per-cluster layout. Defaults to the project name.",
)
@click.option(
    "--deploy-version",
    "-d",
    "deploy_version",
    default=None,
    help="Revision about to be deployed. Defaults to the configured target (master).",
)
@click.pass_context
def to_deploy_cmd(
    ctx,
    owner: str,
    project: str,
    env: str,
    author: str | None,
    cluster: str | None,
    container: str | None,
    deploy_version: str | None,
):
    """List commits that are not yet running in ENV.

    Reads the deployed image tag from the config repository, lists every
    commit made since, and looks up the Jira ticket referenced by each
    commit (or its pull request) together with its release readiness.

    \b
    Required environment variables:
      GITHUB_TOKEN   GitHub token (or use gh CLI)
      JIRA_SERVER    Jira base URL
      JIRA_TOKEN     Jira personal access token
    """
    config = ctx.obj["config"]

    if not config.github_token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")

    try:
        engine = build_engine(config, project)
    except (ConfigError, UnknownProjectError) as e:
        raise click.UsageError(str(e))

    err_console.print(f"[dim]Checking {escape(owner)}/{escape(project)} against {escape(env)}...[/dim]")
    try:
        report = engine.build_report(
            owner,
            project,
            env,
            sub_name=container,
            cluster=cluster,
            target_revision=deploy_version,
        )
    except ShipreadyError as e:
        raise click.ClickException(str(e))

    if not report.entries:
        err_console.print("[green]Nothing to deploy: the environment is up to date.[/green]")

    print_report(report, config.github_server, console=console, author=author)

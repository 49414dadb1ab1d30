"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import json
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from fork_sync_manager.configuration.env import get_settings
from fork_sync_manager.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, InvalidRepositoryInputError
from fork_sync_manager.configuration.models import GitHubAuthenticationType
from fork_sync_manager.configuration.reconcile import validate_github_authentication_configuration, validate_repository_input
from fork_sync_manager.events.router import EventRouter
from fork_sync_manager.github.adapter import GitHubKitAdapter
from fork_sync_manager.github.client import build_client_factory
from fork_sync_manager.schemas.sync_config import SyncConfiguration
from fork_sync_manager.synchronize.driver import load_and_validate_sync_configuration, run_action_sync
from fork_sync_manager.synchronize.models import SyncOutcome, ValidationResult
from fork_sync_manager.synchronize.results import summarize_sync_outcome, write_workflow_outputs
from fork_sync_manager.synchronize.validation import validate_sync_configuration
from fork_sync_manager.utils.log import configure_logging
from fork_sync_manager.utils.yaml import load_yaml_file

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False)

GitHubApiUrlOption = Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")]
GitHubPatTokenOption = Annotated[str | None, Option(envvar=["GITHUB_PAT_TOKEN", "GITHUB_TOKEN"], help="GitHub Personal Access Token.")]
GitHubAppIdOption = Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")]
GitHubAppPrivateKeyPathOption = Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")]
DebugOption = Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")]


def reconcile_authentication(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
) -> GitHubAuthenticationType:
    """Validate authentication options, exiting with an error message if they are unusable."""
    try:
        return asyncio.run(
            validate_github_authentication_configuration(
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
            )
        )
    except GitHubAuthenticationConfigurationUndefinedError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


@typer_app.command(name="validate-config")
def validate_config_cli(
    config_path: Annotated[Path, Argument(help="Path to a local sync configuration file.")],
) -> None:
    """Validate a local sync configuration file."""
    if not config_path.exists():
        typer.echo(f"Configuration file not found: {config_path.absolute()}", err=True)
        raise typer.Exit(1)
    try:
        raw_configuration = load_yaml_file(config_path)
    except Exception as exc:
        typer.echo(f"Failed to parse YAML file {config_path}: {exc}", err=True)
        raise typer.Exit(1) from exc
    result = validate_sync_configuration(raw_configuration)
    if not result.valid:
        typer.echo(f"Invalid configuration in {config_path}:", err=True)
        for error in result.errors:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Configuration in {config_path} is valid")


@typer_app.command(name="handle-event")
def handle_event_cli(
    event_name: Annotated[str, Option(envvar="GITHUB_EVENT_NAME", help="Name of the GitHub event (push, fork, ...).")],
    event_path: Annotated[Path, Option(envvar="GITHUB_EVENT_PATH", help="Path to the JSON event payload.")],
    github_api_url: GitHubApiUrlOption = "https://api.github.com",
    github_pat_token: GitHubPatTokenOption = None,
    github_app_id: GitHubAppIdOption = None,
    github_app_private_key_path: GitHubAppPrivateKeyPathOption = None,
    debug: DebugOption = False,
) -> None:
    """Run one webhook event payload through the event router."""
    settings = get_settings()
    configure_logging(debug or settings.DEBUG)
    if not event_path.exists():
        typer.echo(f"Event payload not found: {event_path.absolute()}", err=True)
        raise typer.Exit(1)
    payload = json.loads(event_path.read_text(encoding="utf-8"))

    github_auth_type = reconcile_authentication(github_pat_token, github_app_id, github_app_private_key_path)
    router = EventRouter(
        build_client_factory(
            github_auth_type,
            github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
        ),
        config_path=settings.CONFIG_FILE_PATH,
        branch_prefix=settings.SYNC_BRANCH_PREFIX,
    )
    result = asyncio.run(router.dispatch(event_name, payload))
    if isinstance(result, SyncOutcome):
        typer.echo(summarize_sync_outcome(result))


# --- Typer group for commands acting on one repository ---
repo_app = typer.Typer(help="Repository-related commands")


def repo_callback(
    ctx: typer.Context,
    repo: Annotated[str, Argument(envvar="GITHUB_REPOSITORY", help="Fork repository name (owner/repo).")],
    github_api_url: GitHubApiUrlOption = "https://api.github.com",
    github_pat_token: GitHubPatTokenOption = None,
    github_app_id: GitHubAppIdOption = None,
    github_app_private_key_path: GitHubAppPrivateKeyPathOption = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
    debug: DebugOption = False,
) -> None:
    """Set the repository for the current context."""
    settings = get_settings()
    configure_logging(debug or settings.DEBUG)
    try:
        validate_repository_input("repository", repo)
    except InvalidRepositoryInputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    ctx.ensure_object(dict)
    ctx.obj["repo"] = repo
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["github_pat_token"] = github_pat_token
    ctx.obj["github_app_id"] = github_app_id
    ctx.obj["github_app_private_key_path"] = github_app_private_key_path
    ctx.obj["github_app_installation_id"] = github_app_installation_id
    ctx.obj["github_auth_type"] = reconcile_authentication(github_pat_token, github_app_id, github_app_private_key_path)
    ctx.obj["settings"] = settings


repo_app.callback()(repo_callback)


async def create_repository_adapter(ctx: typer.Context) -> GitHubKitAdapter:
    """Create the adapter for the repository stored in the Typer context."""
    return await GitHubKitAdapter.create(
        repo=ctx.obj["repo"],
        github_auth_type=ctx.obj["github_auth_type"],
        github_pat_token=ctx.obj["github_pat_token"],
        github_app_id=ctx.obj["github_app_id"],
        github_app_private_key_path=ctx.obj["github_app_private_key_path"],
        github_app_installation_id=ctx.obj["github_app_installation_id"],
        github_api_url=ctx.obj["github_api_url"],
    )


@repo_app.command(name="sync")
def sync_cli(
    ctx: typer.Context,
    upstream: Annotated[
        str | None,
        Option(envvar="UPSTREAM_REPO", help="Upstream repository (owner/repo). Defaults to the configuration file, then the fork's parent."),
    ] = None,
    create_pr: Annotated[
        bool | None,
        Option("--create-pr/--no-create-pr", help="Open a pull request instead of pushing directly. Overrides the configuration file."),
    ] = None,
    dry_run: Annotated[bool, Option(envvar="DRY_RUN", help="Compare with upstream and report, without changing anything.")] = False,
    check_secrets: Annotated[
        bool,
        Option(envvar="SYNC_SECRETS", help="Report upstream Actions secrets missing from the fork. Secret values are never copied."),
    ] = False,
) -> None:
    """Sync the fork with its upstream repository."""
    settings = ctx.obj["settings"]
    try:
        validate_repository_input("upstream", upstream)
    except InvalidRepositoryInputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    if dry_run:
        typer.echo("Running in dry-run mode - no changes will be applied")

    async def _run() -> SyncOutcome:
        github_adapter = await create_repository_adapter(ctx)
        return await run_action_sync(
            github_adapter,
            upstream=upstream,
            create_pr=create_pr,
            dry_run=dry_run,
            check_secrets=check_secrets,
            config_path=settings.CONFIG_FILE_PATH,
            branch_prefix=settings.SYNC_BRANCH_PREFIX,
        )

    try:
        outcome = asyncio.run(_run())
    except Exception as exc:
        failed = SyncOutcome(success=False, message=str(exc))
        write_workflow_outputs(failed)
        typer.echo(f"Sync failed: {exc}", err=True)
        raise typer.Exit(1) from exc

    summary = summarize_sync_outcome(outcome)
    typer.echo(f"Sync Summary:\n{summary}")
    write_workflow_outputs(outcome)


@repo_app.command(name="check-config")
def check_config_cli(ctx: typer.Context) -> None:
    """Fetch and validate the repository's sync configuration file."""
    settings = ctx.obj["settings"]

    async def _run() -> tuple[SyncConfiguration | None, ValidationResult | None]:
        github_adapter = await create_repository_adapter(ctx)
        return await load_and_validate_sync_configuration(github_adapter, settings.CONFIG_FILE_PATH)

    try:
        configuration, validation = asyncio.run(_run())
    except Exception as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    if validation is None:
        typer.echo(f"No {settings.CONFIG_FILE_PATH} found in {ctx.obj['repo']}")
        return
    if configuration is None:
        typer.echo(f"Invalid configuration in {ctx.obj['repo']}:", err=True)
        for error in validation.errors:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Configuration in {ctx.obj['repo']} is valid")
    typer.echo(configuration.model_dump_json(indent=2))


typer_app.add_typer(repo_app, name="repo")


if __name__ == "__main__":
    typer_app()

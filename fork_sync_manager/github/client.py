# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up authenticated githubkit clients for PAT and GitHub App credentials."""

from pathlib import Path
from typing import Awaitable, Callable, TypeAlias

from githubkit import GitHub
from githubkit.auth import (
    AppAuthStrategy,
    AppInstallationAuthStrategy,
    TokenAuthStrategy,
)

from fork_sync_manager.configuration.models import GitHubAuthenticationType

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]

ClientFactory: TypeAlias = Callable[[int | None], Awaitable[GitHubClient]]
"""Returns a client for a GitHub App installation ID (None when not triggered by an App installation)."""


def read_private_key(github_app_private_key_path: Path) -> str:
    """Read a GitHub App private key from disk."""
    with open(github_app_private_key_path, encoding="utf-8") as f:
        return f.read()


async def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns an authenticated GitHub client using GitHub PAT credentials."""
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    # Disable HTTP caching so comparisons always see the latest commits
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


async def get_github_app_installation_client(
    github_app_id: int,
    github_app_private_key: str,
    installation_id: int,
    github_api_url: str,
) -> GitHub[AppInstallationAuthStrategy]:
    """Returns a GitHub client authenticated as one installation of a GitHub App."""
    if not (github_app_id and github_app_private_key and installation_id):
        raise RuntimeError("GitHub App authentication requires app_id, private key, and installation_id.")
    try:
        app_client = GitHub(
            auth=AppAuthStrategy(app_id=github_app_id, private_key=github_app_private_key),
            base_url=github_api_url,
            http_cache=False,
        )
        return app_client.with_auth(app_client.auth.as_installation(installation_id))
    except Exception as e:
        raise ValueError(f"Failed to authenticate as GitHub App installation {installation_id}: {e}") from e


def build_client_factory(
    github_auth_type: GitHubAuthenticationType,
    github_api_url: str,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
) -> ClientFactory:
    """Build a factory producing a client for each incoming event.

    PAT credentials ignore the installation ID. App credentials need the
    installation ID carried by the event payload.
    """
    if github_auth_type == GitHubAuthenticationType.PAT:
        if not github_pat_token:
            raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")

        async def pat_factory(installation_id: int | None) -> GitHubClient:
            return await get_github_pat_client(github_pat_token, github_api_url)

        return pat_factory

    if not (github_app_id and github_app_private_key_path):
        raise RuntimeError("GitHub App authentication requires app_id and private_key_path in config.")
    private_key = read_private_key(github_app_private_key_path)

    async def app_factory(installation_id: int | None) -> GitHubClient:
        if installation_id is None:
            raise RuntimeError("Event payload has no installation ID; cannot authenticate as the GitHub App.")
        return await get_github_app_installation_client(github_app_id, private_key, installation_id, github_api_url)

    return app_factory

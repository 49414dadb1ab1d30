"""Reconcile GitHub authentication configuration and command line input."""

from pathlib import Path

from fork_sync_manager.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidRepositoryInputError,
)
from fork_sync_manager.configuration.models import GitHubAuthenticationType
from fork_sync_manager.utils.constants import REPOSITORY_IDENTIFIER_PATTERN


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    The installation ID of a GitHub App is not part of this configuration:
    it arrives with every event payload, or is passed per command.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If no configuration, both configurations, or an incomplete App configuration is given.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    has_app_setting = bool(github_app_id or github_app_private_key_path)
    if github_pat_token and has_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if github_app_id and github_app_private_key_path:
        return GitHubAuthenticationType.APP

    if has_app_setting:
        missing = []
        if not github_app_id:
            missing.append("GitHub App ID (command line option github_app_id, environment variable GITHUB_APP_ID)")
        if not github_app_private_key_path:
            missing.append(
                "GitHub App private key path (command line option github_app_private_key_path, environment variable GITHUB_APP_PRIVATE_KEY_PATH)"
            )
        raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))

    raise GitHubAuthenticationConfigurationUndefinedError(
        "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
    )


def validate_repository_input(name: str, value: str | None) -> str | None:
    """Validate an optional 'owner/repo' value supplied on the command line.

    Raises:
        InvalidRepositoryInputError: If value is set and does not look like 'owner/repo'.
    """
    if value is None or value == "":
        return None
    if not REPOSITORY_IDENTIFIER_PATTERN.match(value):
        raise InvalidRepositoryInputError(name, value)
    return value

"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

import base64
from typing import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import ContentFile

from fork_sync_manager.configuration.models import GitHubAuthenticationType
from fork_sync_manager.github.adapter import GitHubKitAdapter, is_not_found


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, parsed_data: object = None, status_code: int = 200) -> None:
        """Initialize the dummy response with parsed data and a status code."""
        self.status_code: int = status_code
        self.parsed_data = parsed_data if parsed_data is not None else MagicMock()


def make_content_file(text: str) -> MagicMock:
    """Create a ContentFile mock holding base64-encoded text."""
    content_file = MagicMock(spec=ContentFile)
    content_file.content = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return content_file


def test_is_not_found(request_failed: Callable[..., RequestFailed]) -> None:
    """Test that only 404 request failures count as not found."""
    assert is_not_found(request_failed(404)) is True
    assert is_not_found(request_failed(500)) is False
    assert is_not_found(ValueError("404")) is False


def test_full_name() -> None:
    """Test the owner/repo name of the bound repository."""
    assert GitHubKitAdapter(MagicMock(), "owner", "repo").full_name == "owner/repo"


def test_for_repository_shares_client() -> None:
    """Test that adapters for other repositories reuse the same client."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    upstream = adapter.for_repository("acme", "widgets")
    assert isinstance(upstream, GitHubKitAdapter)
    assert upstream.client is adapter.client
    assert upstream.full_name == "acme/widgets"


@pytest.mark.asyncio
async def test_get_file_content_decodes_base64() -> None:
    """Test that file content is returned decoded."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get_content = AsyncMock(return_value=DummyResponse(make_content_file("auto_sync: true\n")))

    assert await adapter.get_file_content(".fork-sync.yml") == "auto_sync: true\n"

    adapter.client.rest.repos.async_get_content.assert_awaited_once_with(owner="owner", repo="repo", path=".fork-sync.yml")


@pytest.mark.asyncio
async def test_get_file_content_passes_ref() -> None:
    """Test that a ref is only sent when given."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get_content = AsyncMock(return_value=DummyResponse(make_content_file("x")))
    await adapter.get_file_content("file.txt", ref="develop")
    adapter.client.rest.repos.async_get_content.assert_awaited_once_with(owner="owner", repo="repo", path="file.txt", ref="develop")


@pytest.mark.asyncio
async def test_get_file_content_directory() -> None:
    """Test that a directory listing is rejected."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get_content = AsyncMock(return_value=DummyResponse([MagicMock()]))
    with pytest.raises(ValueError, match="not a regular file"):
        await adapter.get_file_content(".fork-sync.yml")


@pytest.mark.asyncio
async def test_get_file_content_not_found(request_failed: Callable[..., RequestFailed]) -> None:
    """Test that a 404 propagates for the caller to interpret."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get_content = AsyncMock(side_effect=request_failed(404))
    with pytest.raises(RequestFailed):
        await adapter.get_file_content(".fork-sync.yml")


@pytest.mark.asyncio
async def test_compare_commits() -> None:
    """Test that the basehead range is passed through."""
    adapter = GitHubKitAdapter(MagicMock(), "acme", "widgets")
    comparison = MagicMock()
    adapter.client.rest.repos.async_compare_commits = AsyncMock(return_value=DummyResponse(comparison))

    assert await adapter.compare_commits("fork:main...acme:main") is comparison

    adapter.client.rest.repos.async_compare_commits.assert_awaited_once_with(owner="acme", repo="widgets", basehead="fork:main...acme:main")


@pytest.mark.asyncio
async def test_create_ref() -> None:
    """Test creating a fully-qualified branch ref."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.git.async_create_ref = AsyncMock(return_value=DummyResponse())
    await adapter.create_ref("refs/heads/fork-sync-x", "abc123")
    adapter.client.rest.git.async_create_ref.assert_awaited_once_with(owner="owner", repo="repo", ref="refs/heads/fork-sync-x", sha="abc123")


@pytest.mark.asyncio
async def test_update_ref_force() -> None:
    """Test that force is passed to the ref update."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.git.async_update_ref = AsyncMock(return_value=DummyResponse())
    await adapter.update_ref("heads/main", "abc123", force=True)
    adapter.client.rest.git.async_update_ref.assert_awaited_once_with(owner="owner", repo="repo", ref="heads/main", sha="abc123", force=True)


@pytest.mark.asyncio
async def test_update_ref_422_becomes_value_error(request_failed: Callable[..., RequestFailed]) -> None:
    """Test that a 422 is reported as ValueError with GitHub's message."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    error = request_failed(422, json_data={"message": "Update is not a fast forward", "errors": []})
    adapter.client.rest.git.async_update_ref = AsyncMock(side_effect=error)
    with pytest.raises(ValueError, match="Update is not a fast forward"):
        await adapter.update_ref("heads/main", "abc123")


@pytest.mark.asyncio
async def test_create_pull_request_omits_null_parameters() -> None:
    """Test that None-valued optional parameters are not sent."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_create = AsyncMock(return_value=DummyResponse())
    await adapter.create_pull_request(title="Sync", head="fork-sync-x", base="main", body=None)
    adapter.client.rest.pulls.async_create.assert_awaited_once_with(owner="owner", repo="repo", title="Sync", head="fork-sync-x", base="main")


@pytest.mark.asyncio
async def test_create_issue() -> None:
    """Test creating an issue with a body."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    issue = MagicMock(number=1)
    adapter.client.rest.issues.async_create = AsyncMock(return_value=DummyResponse(issue))
    assert await adapter.create_issue(title="Welcome", body="Hello") is issue
    adapter.client.rest.issues.async_create.assert_awaited_once_with(owner="owner", repo="repo", title="Welcome", body="Hello")


@pytest.mark.asyncio
async def test_delete_ref() -> None:
    """Test deleting a branch ref."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.git.async_delete_ref = AsyncMock()
    await adapter.delete_ref("heads/fork-sync-x")
    adapter.client.rest.git.async_delete_ref.assert_awaited_once_with(owner="owner", repo="repo", ref="heads/fork-sync-x")


def make_secrets_page(names: list[str], total_count: int) -> MagicMock:
    """Create one page of a list-repository-secrets response."""
    secrets = []
    for name in names:
        secret = MagicMock()
        secret.name = name
        secrets.append(secret)
    return MagicMock(secrets=secrets, total_count=total_count)


@pytest.mark.asyncio
async def test_list_repo_secrets_returns_names() -> None:
    """Test that only secret names are returned."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.actions.async_list_repo_secrets = AsyncMock(return_value=DummyResponse(make_secrets_page(["NPM_TOKEN", "DEPLOY_KEY"], 2)))
    assert await adapter.list_repo_secrets() == ["NPM_TOKEN", "DEPLOY_KEY"]
    adapter.client.rest.actions.async_list_repo_secrets.assert_awaited_once_with(owner="owner", repo="repo", per_page=100, page=1)


@pytest.mark.asyncio
async def test_list_repo_secrets_follows_pages() -> None:
    """Test that every page is read until total_count names were collected."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    first_page = [f"SECRET_{index}" for index in range(100)]
    adapter.client.rest.actions.async_list_repo_secrets = AsyncMock(
        side_effect=[DummyResponse(make_secrets_page(first_page, 101)), DummyResponse(make_secrets_page(["LAST"], 101))]
    )
    names = await adapter.list_repo_secrets()
    assert names == [*first_page, "LAST"]
    assert adapter.client.rest.actions.async_list_repo_secrets.await_args.kwargs["page"] == 2


@pytest.mark.asyncio
async def test_create_with_pat() -> None:
    """Test creating an adapter from PAT credentials."""
    client = MagicMock()
    with patch("fork_sync_manager.github.adapter.get_github_pat_client", new_callable=AsyncMock, return_value=client) as mock_client:
        adapter = await GitHubKitAdapter.create("owner/repo", GitHubAuthenticationType.PAT, github_pat_token="token")
    mock_client.assert_awaited_once_with("token", "https://api.github.com")
    assert adapter.client is client
    assert adapter.full_name == "owner/repo"


@pytest.mark.asyncio
async def test_create_with_incomplete_app_credentials() -> None:
    """Test that App authentication without an installation ID fails."""
    with pytest.raises(RuntimeError):
        await GitHubKitAdapter.create("owner/repo", GitHubAuthenticationType.APP, github_app_id=1)


@pytest.mark.asyncio
async def test_create_with_malformed_repository() -> None:
    """Test that a malformed repository name is rejected."""
    with pytest.raises(ValueError):
        await GitHubKitAdapter.create("owner-repo", GitHubAuthenticationType.PAT, github_pat_token="token")

"""Unit tests for reporting Actions secrets missing from a fork."""

import logging
from typing import Callable
from unittest.mock import MagicMock

import pytest
from githubkit.exception import RequestFailed

from fork_sync_manager.schemas.sync_config import UpstreamRepository
from fork_sync_manager.synchronize.secrets import find_missing_secrets

UPSTREAM = UpstreamRepository(owner="acme", repo="widgets")


@pytest.mark.asyncio
async def test_missing_secrets_keep_upstream_order(fork_adapter: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
    """Test that names defined upstream but not in the fork are reported and logged."""
    fork_adapter.upstream_adapter.list_repo_secrets.return_value = ["NPM_TOKEN", "SHARED", "DEPLOY_KEY"]
    fork_adapter.list_repo_secrets.return_value = ["SHARED", "FORK_ONLY"]

    with caplog.at_level(logging.WARNING):
        missing = await find_missing_secrets(fork_adapter, UPSTREAM)

    assert missing == ["NPM_TOKEN", "DEPLOY_KEY"]
    fork_adapter.for_repository.assert_called_once_with("acme", "widgets")
    assert "Upstream secrets need manual sync" in caplog.text


@pytest.mark.asyncio
async def test_no_missing_secrets(fork_adapter: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
    """Test that a fork defining every upstream secret reports nothing."""
    fork_adapter.upstream_adapter.list_repo_secrets.return_value = ["SHARED"]
    fork_adapter.list_repo_secrets.return_value = ["SHARED"]

    with caplog.at_level(logging.WARNING):
        assert await find_missing_secrets(fork_adapter, UPSTREAM) == []

    assert "manual sync" not in caplog.text


@pytest.mark.asyncio
async def test_listing_failure_is_a_warning(
    fork_adapter: MagicMock, request_failed: Callable[..., RequestFailed], caplog: pytest.LogCaptureFixture
) -> None:
    """Test that missing permission to list secrets does not fail the sync."""
    fork_adapter.upstream_adapter.list_repo_secrets.side_effect = request_failed(403)

    with caplog.at_level(logging.WARNING):
        assert await find_missing_secrets(fork_adapter, UPSTREAM) == []

    assert "Could not check repository secrets" in caplog.text
    fork_adapter.list_repo_secrets.assert_not_awaited()

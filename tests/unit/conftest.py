"""Fixtures for unit tests."""

from typing import Any, Callable, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog
from githubkit.exception import RequestFailed


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


def make_fork_adapter(owner: str = "fork-owner", repo_name: str = "widgets") -> MagicMock:
    """Create a mock fork adapter whose upstream adapters share call tracking."""
    adapter = MagicMock()
    adapter.owner = owner
    adapter.repo_name = repo_name
    adapter.full_name = f"{owner}/{repo_name}"
    for method in (
        "get_repository",
        "get_file_content",
        "compare_commits",
        "get_ref",
        "create_ref",
        "update_ref",
        "delete_ref",
        "create_pull_request",
        "create_issue",
        "list_repo_secrets",
    ):
        setattr(adapter, method, AsyncMock())
    upstream_adapter = MagicMock()
    upstream_adapter.get_repository = AsyncMock()
    upstream_adapter.compare_commits = AsyncMock()
    upstream_adapter.get_ref = AsyncMock()
    upstream_adapter.list_repo_secrets = AsyncMock()
    adapter.for_repository = MagicMock(return_value=upstream_adapter)
    adapter.upstream_adapter = upstream_adapter
    return adapter


@pytest.fixture
def fork_adapter() -> MagicMock:
    """A mock adapter for the fork 'fork-owner/widgets'."""
    return make_fork_adapter()


@pytest.fixture
def request_failed() -> Callable[..., RequestFailed]:
    """Factory for githubkit RequestFailed errors with a given status code."""

    def _make(status_code: int, headers: dict[str, str] | None = None, json_data: dict[str, Any] | None = None) -> RequestFailed:
        response = MagicMock()
        response.status_code = status_code
        response.headers = headers or {}
        response.json = MagicMock(return_value=json_data or {})
        return RequestFailed(response)

    return _make

"""Contains exceptions raised while synchronizing a fork with its upstream."""


class ForkSyncError(Exception):
    """Base class for errors raised by a sync attempt."""

    pass


class ConfigLoadError(ForkSyncError):
    """Raised when the sync configuration file exists but cannot be retrieved or parsed."""

    pass


class InvalidSyncConfigurationError(ForkSyncError):
    """Raised when a sync configuration document fails validation."""

    def __init__(self, errors: list[str]) -> None:
        """Initializes the exception with the validation errors."""
        super().__init__(f"Invalid sync configuration: {', '.join(errors)}")
        self.errors = errors


class ComparisonError(ForkSyncError):
    """Raised when the upstream repository or the branch comparison cannot be fetched."""

    pass


class SyncExecutionError(ForkSyncError):
    """Raised when creating refs, updating refs or opening the sync pull request fails."""

    pass

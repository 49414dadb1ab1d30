"""Contains exceptions raised when reconciling application configuration."""


class GitHubAuthenticationConfigurationUndefinedError(Exception):
    """Raised when the GitHub authentication configuration is missing, incomplete or ambiguous."""

    pass


class InvalidRepositoryInputError(ValueError):
    """Raised when a repository given on the command line is not in 'owner/repo' format."""

    def __init__(self, name: str, value: str) -> None:
        """Initializes the exception with the offending input."""
        super().__init__(f"Invalid {name} format: {value}. Must be in format: owner/repo")
        self.name = name
        self.value = value

"""Pydantic models for the subset of GitHub webhook payloads the router reads."""

from pydantic import BaseModel, ConfigDict


class PayloadModel(BaseModel):
    """Base model ignoring the many payload fields that are not needed."""

    model_config = ConfigDict(extra="ignore")


class AccountPayload(PayloadModel):
    """A user or organization account."""

    login: str


class InstallationPayload(PayloadModel):
    """The GitHub App installation an event was delivered for."""

    id: int
    account: AccountPayload | None = None


class RepositoryPayload(PayloadModel):
    """A repository as embedded in webhook payloads."""

    name: str
    full_name: str
    owner: AccountPayload
    fork: bool = False

    @property
    def owner_login(self) -> str:
        """Return the login of the repository owner."""
        return self.owner.login


class EventPayload(PayloadModel):
    """Fields common to every event the router handles."""

    installation: InstallationPayload | None = None

    @property
    def installation_id(self) -> int | None:
        """Return the installation ID, if the event was delivered to a GitHub App."""
        return self.installation.id if self.installation else None


class PushEventPayload(EventPayload):
    """Payload of a push event."""

    ref: str
    repository: RepositoryPayload


class ForkEventPayload(EventPayload):
    """Payload of a fork event: repository is the original, forkee the new fork."""

    repository: RepositoryPayload
    forkee: RepositoryPayload


class PullRequestPayload(PayloadModel):
    """A pull request as embedded in pull_request events."""

    number: int


class PullRequestEventPayload(EventPayload):
    """Payload of a pull_request event."""

    action: str
    repository: RepositoryPayload
    pull_request: PullRequestPayload


class InstalledRepositoryPayload(PayloadModel):
    """A repository listed in installation_repositories events (no owner object)."""

    name: str
    full_name: str


class InstallationEventPayload(EventPayload):
    """Payload of installation events."""

    action: str


class InstallationRepositoriesEventPayload(EventPayload):
    """Payload of installation_repositories events."""

    action: str
    repositories_added: list[InstalledRepositoryPayload] = []

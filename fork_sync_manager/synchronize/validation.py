"""Validation of raw sync configuration documents."""

from typing import Any

from fork_sync_manager.schemas.sync_config import SyncConfiguration
from fork_sync_manager.synchronize.exceptions import InvalidSyncConfigurationError
from fork_sync_manager.synchronize.models import ValidationResult
from fork_sync_manager.utils.github import is_repository_identifier

OPTIONAL_BOOLEAN_FIELDS = ("create_pr",)
OPTIONAL_STRING_FIELDS = ("pr_title", "pr_body")


def validate_sync_configuration(config: Any) -> ValidationResult:
    """Check the structure and types of a parsed configuration document.

    Every applicable check runs, so all problems are reported together. A
    document that is not a mapping gets a single error and no further
    checks. Never raises.
    """
    if not isinstance(config, dict):
        return ValidationResult(valid=False, errors=["Configuration must be an object"])

    errors: list[str] = []

    if not isinstance(config.get("auto_sync"), bool):
        errors.append("auto_sync must be a boolean")

    upstream = config.get("upstream")
    if not upstream or not isinstance(upstream, str):
        errors.append('upstream must be a string in format "owner/repo"')
    elif not is_repository_identifier(upstream):
        errors.append('upstream must be in format "owner/repo"')

    branches = config.get("branches")
    if branches is not None:
        if not isinstance(branches, list):
            errors.append("branches must be an array")
        elif not all(isinstance(branch, str) for branch in branches):
            errors.append("branches must contain only strings")

    for name in OPTIONAL_BOOLEAN_FIELDS:
        if name in config and not isinstance(config[name], bool):
            errors.append(f"{name} must be a boolean")

    for name in OPTIONAL_STRING_FIELDS:
        if name in config and not isinstance(config[name], str):
            errors.append(f"{name} must be a string")

    return ValidationResult(valid=not errors, errors=errors)


def parse_sync_configuration(config: Any) -> SyncConfiguration:
    """Validate a raw document and build a SyncConfiguration from it.

    Unknown keys are ignored and a null branches list falls back to the
    default.

    Raises:
        InvalidSyncConfigurationError: If the document fails validation.
    """
    result = validate_sync_configuration(config)
    if not result.valid:
        raise InvalidSyncConfigurationError(result.errors)
    fields = {
        name: value for name, value in config.items() if name in SyncConfiguration.model_fields and not (name == "branches" and value is None)
    }
    return SyncConfiguration.model_validate(fields)

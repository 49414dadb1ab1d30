"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# Sync Configuration Constants
# ----------------------------

DEFAULT_CONFIG_FILE_PATH = ".fork-sync.yml"
"""Path of the sync configuration file, relative to the repository root."""

DEFAULT_SYNC_BRANCHES = ["main", "master"]
"""Branches eligible for sync when a configuration does not list any."""

DEFAULT_PULL_REQUEST_TITLE = "🔄 Auto-sync with upstream"
"""Default title of sync pull requests."""

DEFAULT_PULL_REQUEST_BODY = """This PR automatically syncs changes from the upstream repository.

**Upstream:** {upstream}
**Branch:** {branch}
**Commits behind:** {commits_behind}

## Changes included:
{commit_list}"""
"""Default body of sync pull requests. Supports the {upstream}, {branch}, {commits_behind} and {commit_list} placeholders."""

SHORT_SHA_LENGTH = 7
"""Number of characters of a commit SHA shown in pull request commit lists."""

# Branch Naming Constants
# -----------------------

DEFAULT_SYNC_BRANCH_PREFIX = "fork-sync"
"""Prefix of branches created in a fork to carry a sync pull request."""

# Input Validation Constants
# --------------------------

REPOSITORY_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$")
"""Pattern a repository given on the command line must match (owner/repo)."""

# Welcome Issue Constants
# -----------------------

WELCOME_ISSUE_TITLE = "🎉 Welcome to fork-sync-manager - Automated Fork Sync Setup"
"""Title of the issue opened in a newly created fork."""

WELCOME_ISSUE_TEMPLATE_NAME = "welcome_issue_body.j2"
"""Jinja2 template (in the package templates directory) for the welcome issue body."""

"""Configuration and constants for the add-remote tool."""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

__version__ = "0.9.0"

# Hosting API Configuration
GITLAB_API_BASE = "https://gitlab.com/api/v4"
GITHUB_API_BASE = "https://api.github.com"
USER_AGENT = f"add-remote/{__version__}"

# Requests
DEFAULT_TIMEOUT = 30

# Pagination
GITHUB_PAGE_SIZE = 100

# Remote installation
PUSH_URL_SENTINEL = "disable_push"
DEFAULT_MAIN_FORK_ALIAS = "upstream"

# Git config keys
CONFIG_SECTION = "add-remote"
PREFERRED_FORK_KEY = f"{CONFIG_SECTION}.preferredFork"
MAIN_FORK_ALIAS_KEY = f"{CONFIG_SECTION}.mainForkOwnerAlias"
FORK_ALIAS_PREFIX = f"{CONFIG_SECTION}.forkAlias"
GITLAB_TOKEN_KEY = f"{CONFIG_SECTION}.gitLabToken"
GITHUB_TOKEN_KEY = f"{CONFIG_SECTION}.gitHubToken"

# Environment fallbacks for the tokens
GITLAB_TOKEN_ENV = "ADD_REMOTE_GITLAB_TOKEN"
GITHUB_TOKEN_ENV = "ADD_REMOTE_GITHUB_TOKEN"

TOKEN_HELP_URL = "https://github.com/Fraser999/Add-Remote#personal-access-tokens"


# Error Codes
class ErrorCode:
    """Standardized error codes for consistent error handling."""
    NOT_A_REPOSITORY = "NOT_A_REPOSITORY"
    NO_SUPPORTED_REMOTES = "NO_SUPPORTED_REMOTES"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    VCS_COMMAND_FAILED = "VCS_COMMAND_FAILED"
    REQUEST_FAILED = "REQUEST_FAILED"
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"
    MALFORMED_REMOTE = "MALFORMED_REMOTE"
    CYCLIC_FORK_CHAIN = "CYCLIC_FORK_CHAIN"
    GIT_NOT_FOUND = "GIT_NOT_FOUND"
    CANCELLED = "CANCELLED"


# Hosting API Headers
def get_api_headers() -> dict:
    """Get the headers sent with every hosting API request."""
    return {
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
    }


@dataclass(frozen=True)
class Settings:
    """User configuration read from git config (and the environment for tokens)."""

    preferred_fork: Optional[str] = None
    main_fork_alias: Optional[str] = None
    # Keyed by lower-cased owner; git reports variable names lower-cased.
    fork_aliases: Dict[str, str] = field(default_factory=dict)
    gitlab_token: Optional[str] = None
    github_token: Optional[str] = None

    def fork_alias(self, owner: str) -> Optional[str]:
        return self.fork_aliases.get(owner.lower())


def load_settings(git) -> Settings:
    """
    Build Settings from the repository's git config.

    Args:
        git: A GitAdapter (anything exposing get_config and get_config_regexp)

    Returns:
        Settings instance
    """
    prefix = FORK_ALIAS_PREFIX.lower() + "."
    fork_aliases = {}
    for key, value in git.get_config_regexp(r"^" + FORK_ALIAS_PREFIX.replace(".", r"\.") + r"\.").items():
        lowered = key.lower()
        if lowered.startswith(prefix) and value:
            fork_aliases[lowered[len(prefix):]] = value

    return Settings(
        preferred_fork=git.get_config(PREFERRED_FORK_KEY) or None,
        main_fork_alias=git.get_config(MAIN_FORK_ALIAS_KEY) or None,
        fork_aliases=fork_aliases,
        gitlab_token=git.get_config(GITLAB_TOKEN_KEY) or os.getenv(GITLAB_TOKEN_ENV) or None,
        github_token=git.get_config(GITHUB_TOKEN_KEY) or os.getenv(GITHUB_TOKEN_ENV) or None,
    )

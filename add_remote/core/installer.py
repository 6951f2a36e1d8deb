"""Installation of the chosen fork as a fetch-only remote."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import PUSH_URL_SENTINEL
from ..remotes.url import Endpoint
from ..utils.cancel import CancelToken, checkpoint
from .entities import LocalRemoteTable


logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """What the installer did, for display."""

    url: str
    alias: str
    # (line of `git remote -v`, True if it wasn't there before)
    remote_lines: List[Tuple[str, bool]] = field(default_factory=list)
    branches: str = ""


def choose_url(endpoint: Endpoint, local_remotes: LocalRemoteTable) -> Endpoint:
    """
    Pick the transport for the new remote.

    An SSH endpoint is switched to HTTPS when every local remote uses HTTPS.
    HTTPS is never switched to SSH.
    """
    if not endpoint.is_https and local_remotes.all_https():
        https = endpoint.to_https()
        logger.info(f"All local remotes use HTTPS; installing {https.raw_url} instead of {endpoint.raw_url}")
        return https
    return endpoint


def diff_remote_lines(before: str, after: str) -> List[Tuple[str, bool]]:
    """
    Mark the lines of `after` which weren't in `before`.

    Walks `after` with a cursor into `before`: a line equal to the cursor's
    line is old and advances the cursor, anything else is new.
    """
    before_lines = before.splitlines()
    cursor = 0
    marked = []
    for line in after.splitlines():
        if cursor < len(before_lines) and before_lines[cursor] == line:
            marked.append((line, False))
            cursor += 1
        else:
            marked.append((line, True))
    return marked


class RemoteInstaller:
    """Adds, disables pushing to, and fetches the new remote."""

    def __init__(self, git, local_remotes: LocalRemoteTable, cancel: Optional[CancelToken] = None):
        """
        Args:
            git: GitAdapter (or a test double exposing the same methods)
            local_remotes: Remotes already configured, used to pick the transport
            cancel: Token checked before each git command
        """
        self.git = git
        self.local_remotes = local_remotes
        self.cancel = cancel

    def install(self, endpoint: Endpoint, alias: str) -> InstallResult:
        """
        Install `endpoint` as remote `alias`.

        Raises:
            VcsCommandError: If any git command fails
            OperationCancelled: If the session was cancelled between commands
        """
        url = choose_url(endpoint, self.local_remotes).raw_url

        checkpoint(self.cancel, "git remote -v")
        remotes_before = self.git.remotes_verbose()

        checkpoint(self.cancel, "git remote add")
        self.git.add_remote(alias, url)
        logger.info(f"Added remote '{alias}' -> {url}")

        # Pushing to a fork we don't own should fail immediately
        checkpoint(self.cancel, "git remote set-url --push")
        self.git.set_push_url(alias, PUSH_URL_SENTINEL)

        checkpoint(self.cancel, "git fetch")
        self.git.fetch(alias)

        checkpoint(self.cancel, "git remote -v")
        remotes_after = self.git.remotes_verbose()

        checkpoint(self.cancel, "git branch --list")
        branches = self.git.list_branches(alias)
        if not branches.strip() and alias.lower() != alias:
            logger.debug(f"No branches listed under '{alias}', retrying with '{alias.lower()}'")
            branches = self.git.list_branches(alias.lower())

        return InstallResult(
            url=url,
            alias=alias,
            remote_lines=diff_remote_lines(remotes_before, remotes_after),
            branches=branches,
        )

"""Git operations run through the git executable.

Every call blocks until git exits. Output is captured and decoded; callers
only see the text and whether the command succeeded.
"""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional

from ..core.entities import LocalRemote, LocalRemoteTable
from ..remotes.url import parse_remote_url
from ..utils.errors import GitNotFoundError, NoSupportedRemotesError, NotAGitRepositoryError, VcsCommandError


logger = logging.getLogger(__name__)

DEFAULT_GIT_TIMEOUT = 30
FETCH_TIMEOUT = 300


def find_git() -> Optional[str]:
    """
    Locate the git executable.

    Returns:
        Path to git, or None if it isn't on PATH
    """
    return shutil.which("git")


def run_git_command(
    args: List[str],
    cwd: Optional[str] = None,
    timeout: int = DEFAULT_GIT_TIMEOUT
) -> tuple[int, str, str]:
    """
    Run a git command and capture its output.

    Args:
        args: Command arguments (e.g., ["git", "remote", "-v"])
        cwd: Working directory for the command
        timeout: Timeout in seconds

    Returns:
        Tuple of (returncode, stdout, stderr)

    Raises:
        VcsCommandError: If the command times out
    """
    logger.debug(f"Running: {' '.join(args)}")
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            timeout=timeout
        )
    except subprocess.TimeoutExpired:
        raise VcsCommandError(args, -1, stderr=f"Timed out after {timeout}s")

    return (
        result.returncode,
        result.stdout.decode('utf-8', errors='replace'),
        result.stderr.decode('utf-8', errors='replace')
    )


class GitAdapter:
    """The git operations add-remote needs, run inside one repository."""

    def __init__(self, git: Optional[str] = None, cwd: Optional[str] = None):
        git = git or find_git()
        if git is None:
            raise GitNotFoundError()
        self.git = git
        self.cwd = cwd

    def _run(self, *args: str, timeout: int = DEFAULT_GIT_TIMEOUT) -> tuple[int, str, str]:
        return run_git_command([self.git, *args], cwd=self.cwd, timeout=timeout)

    def _run_checked(self, *args: str, timeout: int = DEFAULT_GIT_TIMEOUT) -> str:
        returncode, stdout, stderr = self._run(*args, timeout=timeout)
        if returncode != 0:
            raise VcsCommandError(["git", *args], returncode, stdout, stderr)
        return stdout

    def list_remotes(self) -> List[str]:
        """
        List the aliases of the configured remotes.

        Raises:
            NotAGitRepositoryError: If git can't list remotes here
        """
        returncode, stdout, stderr = self._run("remote", "show")
        if returncode != 0:
            raise NotAGitRepositoryError(stderr.strip())
        return [line.strip() for line in stdout.splitlines() if line.strip()]

    def remote_url(self, alias: str) -> str:
        return self._run_checked("remote", "get-url", alias).strip()

    def remotes_verbose(self) -> str:
        """Output of `git remote -v`, trimmed."""
        return self._run_checked("remote", "-v").strip()

    def add_remote(self, alias: str, url: str) -> None:
        self._run_checked("remote", "add", alias, url)

    def set_push_url(self, alias: str, url: str) -> None:
        self._run_checked("remote", "set-url", "--push", alias, url)

    def fetch(self, alias: str) -> str:
        return self._run_checked("fetch", alias, timeout=FETCH_TIMEOUT)

    def list_branches(self, alias: str) -> str:
        """Remote-tracking branches of `alias`, most recently committed first."""
        return self._run_checked("branch", "--list", f"{alias}/*", "-vr", "--sort=-committerdate")

    def get_config(self, key: str) -> Optional[str]:
        """
        Read a git config value.

        Returns:
            The value, or None if the key isn't set
        """
        returncode, stdout, _ = self._run("config", "--get", key)
        if returncode != 0:
            return None
        return stdout.strip()

    def get_config_regexp(self, pattern: str) -> Dict[str, str]:
        """Read every config entry whose name matches `pattern`."""
        returncode, stdout, _ = self._run("config", "--get-regexp", pattern)
        # Exit status 1 just means nothing matched
        if returncode != 0:
            return {}
        entries = {}
        for line in stdout.splitlines():
            key, _, value = line.partition(" ")
            if key:
                entries[key] = value.strip()
        return entries

    def set_global_config(self, key: str, value: str) -> None:
        self._run_checked("config", "--global", "--replace-all", key, value)

    def build_local_remote_table(self) -> LocalRemoteTable:
        """
        Collect the local remotes hosted on GitLab or GitHub.

        Remotes on other hosts are skipped.

        Raises:
            NotAGitRepositoryError: If we're not inside a repository
            MalformedLocalRemoteError: If a supported-host URL has no owner/name
            NoSupportedRemotesError: If no remote is on a supported host
        """
        aliases = self.list_remotes()
        table = LocalRemoteTable()
        for alias in aliases:
            endpoint = parse_remote_url(self.remote_url(alias))
            if endpoint is None:
                continue
            table.add(LocalRemote(owner=endpoint.owner, name=endpoint.name, alias=alias, endpoint=endpoint))

        if len(table) == 0:
            raise NoSupportedRemotesError(aliases)
        logger.info(f"Local remotes on supported hosts: {', '.join(table.owners)}")
        return table

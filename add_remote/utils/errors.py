"""Structured error handling utilities."""

import logging
from typing import Any, Dict, List, Optional

from ..config import ErrorCode, TOKEN_HELP_URL
from .redact import redact_dict, redact_token


# Configure module logger
logger = logging.getLogger(__name__)


class AddRemoteError(Exception):
    """Base exception for fatal add-remote errors.

    Every subclass maps to a distinct process exit status.
    """

    exit_code = 1

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)
        logger.error(f"AddRemoteError ({code}): {redact_token(message)}", extra={"details": redact_dict(self.details)})

    def diagnostic(self) -> str:
        """Human-readable, redacted description printed before exiting."""
        return redact_token(self.message)


class NotAGitRepositoryError(AddRemoteError):
    """Raised when `git remote show` fails, i.e. we're not inside a repository."""
    exit_code = 1

    def __init__(self, stderr: str = ""):
        super().__init__(
            ErrorCode.NOT_A_REPOSITORY,
            "Failed to execute 'git remote show'.  Execute this program from inside a Git repository.",
            {"stderr": stderr}
        )


class NoSupportedRemotesError(AddRemoteError):
    """None of the local remotes is hosted on GitLab or GitHub."""
    exit_code = 2

    def __init__(self, remotes: Optional[List[str]] = None):
        super().__init__(
            ErrorCode.NO_SUPPORTED_REMOTES,
            "This repository doesn't appear to be hosted on GitLab or GitHub.  'add-remote' "
            "can only be used with GitLab or GitHub projects.",
            {"remotes": remotes or []}
        )


class MissingCredentialError(AddRemoteError):
    """A provider needs a personal access token which isn't configured."""
    exit_code = 3

    def __init__(self, provider: str, config_key: str, scope: str):
        super().__init__(
            ErrorCode.MISSING_CREDENTIAL,
            f"This repository is hosted on {provider}.  To use 'add-remote' with a {provider} "
            f"project, you must add a {provider} Personal Access Token with \"{scope}\" scope to "
            f"your git config under the key '{config_key}'.  For full details, see {TOKEN_HELP_URL}.",
            {"provider": provider, "config_key": config_key}
        )


class VcsCommandError(AddRemoteError):
    """A git command exited with a non-zero status."""
    exit_code = 4

    def __init__(self, command: List[str], returncode: int, stdout: str = "", stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            ErrorCode.VCS_COMMAND_FAILED,
            f"Failed to run '{' '.join(command)}' (exit status {returncode})",
            {"command": " ".join(command), "returncode": returncode, "stdout": stdout, "stderr": stderr}
        )

    def diagnostic(self) -> str:
        parts = [self.message]
        if self.stdout.strip():
            parts.append(self.stdout.strip())
        if self.stderr.strip():
            parts.append(self.stderr.strip())
        return redact_token("\n".join(parts))


class RequestFailedError(AddRemoteError):
    """A hosting API request failed or returned a non-success status."""
    exit_code = 5

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
        body: str = "",
        reason: Optional[str] = None
    ):
        self.url = url
        self.status_code = status_code
        self.headers = headers or {}
        self.body = body
        details: Dict[str, Any] = {"url": url, "hint": f"Note that Personal Access Tokens are required in some cases.  For full details, see {TOKEN_HELP_URL}."}
        if status_code is not None:
            details["status_code"] = status_code
        if reason:
            details["reason"] = reason
        message = f"Failed to GET {url}"
        if reason:
            message += f": {reason}"
        super().__init__(ErrorCode.REQUEST_FAILED, message, details)

    def diagnostic(self) -> str:
        lines = [f"Failed to GET {self.url}"]
        if self.status_code is not None:
            lines.append(f"Response status: {self.status_code}")
            lines.append("Response headers:")
            for name, value in redact_dict(dict(self.headers)).items():
                lines.append(f"    {name}: {value}")
            lines.append("Response body:")
            lines.append(self.body)
        if self.details.get("reason"):
            lines.append(f"Reason: {self.details['reason']}")
        lines.append("")
        lines.append(self.details["hint"])
        return redact_token("\n".join(lines))


class UnexpectedResponseError(AddRemoteError):
    """A field in an API response was missing or had the wrong type."""
    exit_code = 6

    def __init__(self, field: str, expected: str, url: Optional[str] = None):
        self.field = field
        details: Dict[str, Any] = {"field": field, "expected": expected}
        where = ""
        if url:
            details["url"] = url
            where = f" from {url}"
        super().__init__(
            ErrorCode.UNEXPECTED_RESPONSE,
            f"Unexpected response{where}: field '{field}' should be {expected}",
            details
        )


class MalformedLocalRemoteError(AddRemoteError):
    """A local remote URL names a supported host but has no owner/name path."""
    exit_code = 7

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            ErrorCode.MALFORMED_REMOTE,
            f"Remote URL '{url}' has no '<owner>/<name>' path; check the repository's remote configuration",
            {"url": url}
        )


class CyclicForkChainError(AddRemoteError):
    """Walking the forked-from chain revisited a project."""
    exit_code = 8

    def __init__(self, chain: List[str]):
        self.chain = chain
        super().__init__(
            ErrorCode.CYCLIC_FORK_CHAIN,
            f"Fork chain contains a cycle: {' -> '.join(chain)}",
            {"chain": chain}
        )


class GitNotFoundError(AddRemoteError):
    """Git isn't installed or isn't on PATH."""
    exit_code = 9

    def __init__(self):
        super().__init__(
            ErrorCode.GIT_NOT_FOUND,
            "Git is not installed or not found in PATH",
            {"troubleshooting": "Please install git from https://git-scm.com/downloads"}
        )


class OperationCancelled(AddRemoteError):
    """The session was interrupted; nothing further is attempted."""
    exit_code = 130

    def __init__(self):
        super().__init__(ErrorCode.CANCELLED, "Cancelled", {})

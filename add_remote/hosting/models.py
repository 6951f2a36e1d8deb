"""Data models for the GitLab and GitHub API responses.

Each model decodes only the fields add-remote consumes. A missing field or one
of the wrong type raises UnexpectedResponseError naming the field, rather than
failing later with a KeyError or TypeError.
"""

from typing import Any, Dict, List, Optional

from ..remotes.url import split_owner_and_name
from ..utils.errors import UnexpectedResponseError


_MISSING = object()

_TYPE_NAMES = {str: "a string", int: "an integer", dict: "an object", list: "an array"}


def _lookup(data: Any, path: str) -> Any:
    node = data
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return _MISSING
        node = node[key]
    return node


def require(data: Any, path: str, expected: type, url: Optional[str] = None) -> Any:
    """
    Decode a mandatory field addressed by a dotted path.

    Raises:
        UnexpectedResponseError: If the field is absent, null or of the wrong type
    """
    value = _lookup(data, path)
    # bool is an int subclass; never accept it where a count is expected
    if value is _MISSING or value is None or not isinstance(value, expected) or isinstance(value, bool):
        raise UnexpectedResponseError(path, _TYPE_NAMES.get(expected, expected.__name__), url)
    return value


def optional(data: Any, path: str, expected: type, url: Optional[str] = None) -> Any:
    """Like require(), but an absent or null field decodes to None."""
    value = _lookup(data, path)
    if value is _MISSING or value is None:
        return None
    if not isinstance(value, expected) or isinstance(value, bool):
        raise UnexpectedResponseError(path, _TYPE_NAMES.get(expected, expected.__name__), url)
    return value


def require_list(data: Any, url: Optional[str] = None) -> List[Any]:
    if not isinstance(data, list):
        raise UnexpectedResponseError("<body>", "an array", url)
    return data


def require_path_with_namespace(data: Any, path: str, url: Optional[str] = None) -> tuple[str, str]:
    """Decode a GitLab "namespace/name" field into (owner, name)."""
    value = require(data, path, str, url)
    parts = split_owner_and_name(value)
    if parts is None:
        raise UnexpectedResponseError(path, "a '<namespace>/<name>' path", url)
    return parts


class GitLabProject:
    """Represents the fields of GET projects/:id used to walk the fork chain."""

    def __init__(self, data: Dict[str, Any], url: Optional[str] = None):
        parent = optional(data, "forked_from_project", dict, url)
        if parent is not None:
            self.parent: Optional[tuple[str, str]] = require_path_with_namespace(
                data, "forked_from_project.path_with_namespace", url
            )
            self.ssh_url: Optional[str] = None
        else:
            self.parent = None
            self.ssh_url = require(data, "ssh_url_to_repo", str, url)

    @property
    def is_fork(self) -> bool:
        return self.parent is not None


class GitLabFork:
    """Represents one entry of GET projects/:id/forks."""

    def __init__(self, data: Dict[str, Any], url: Optional[str] = None):
        self.owner, self.name = require_path_with_namespace(data, "path_with_namespace", url)
        self.ssh_url: str = require(data, "ssh_url_to_repo", str, url)
        self.forks_count: int = require(data, "forks_count", int, url)


class GitHubRepository:
    """Represents the fields of GET repos/:owner/:repo naming the source repository."""

    def __init__(self, data: Dict[str, Any], url: Optional[str] = None):
        source = optional(data, "source", dict, url)
        prefix = "source." if source is not None else ""
        self.is_fork = source is not None
        self.owner: str = require(data, f"{prefix}owner.login", str, url)
        self.name: str = require(data, f"{prefix}name", str, url)
        self.clone_url: str = _clone_url(data, prefix, url)


class GitHubFork:
    """Represents one entry of GET repos/:owner/:repo/forks."""

    def __init__(self, data: Dict[str, Any], url: Optional[str] = None):
        self.owner: str = require(data, "owner.login", str, url)
        self.clone_url: str = _clone_url(data, "", url)


def _clone_url(data: Dict[str, Any], prefix: str, url: Optional[str]) -> str:
    ssh_url = optional(data, f"{prefix}ssh_url", str, url)
    if ssh_url:
        return ssh_url
    return require(data, f"{prefix}html_url", str, url)

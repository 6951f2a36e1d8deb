"""Parsing of git remote URLs for the supported hosting providers."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..utils.errors import MalformedLocalRemoteError


logger = logging.getLogger(__name__)


class HostKind(str, Enum):
    """Supported hosting providers."""
    GITLAB = "gitlab"
    GITHUB = "github"

    @property
    def domain(self) -> str:
        return f"{self.value}.com"

    @property
    def display_name(self) -> str:
        return "GitLab" if self is HostKind.GITLAB else "GitHub"


class Transport(str, Enum):
    SSH = "ssh"
    HTTPS = "https"


# Checked in this order; the first prefix that shortens the URL wins.
_PREFIXES = [
    (HostKind.GITLAB, Transport.SSH, "git@gitlab.com:"),
    (HostKind.GITLAB, Transport.HTTPS, "https://gitlab.com/"),
    (HostKind.GITHUB, Transport.SSH, "git@github.com:"),
    (HostKind.GITHUB, Transport.HTTPS, "https://github.com/"),
]

_REPO_SUFFIX = ".git"


@dataclass(frozen=True)
class Endpoint:
    """A repository on a supported host, as reached by one transport."""

    host: HostKind
    owner: str
    name: str
    transport: Transport
    raw_url: str

    @property
    def is_https(self) -> bool:
        return self.transport is Transport.HTTPS

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def to_https(self) -> "Endpoint":
        """Return the HTTPS form of this endpoint (self if already HTTPS)."""
        if self.is_https:
            return self
        return Endpoint(
            host=self.host,
            owner=self.owner,
            name=self.name,
            transport=Transport.HTTPS,
            raw_url=f"https://{self.host.domain}/{self.full_name}",
        )


def split_owner_and_name(owner_and_name: str) -> Optional[tuple[str, str]]:
    """
    Split "owner/name" on the first '/'.

    Anything after the first separator belongs to the name, so GitLab
    subgroup paths such as "group/sub/project" give ("group", "sub/project").

    Returns:
        (owner, name), or None if there is no separator or either half is empty
    """
    owner, sep, name = owner_and_name.partition("/")
    if not sep or not owner or not name:
        return None
    return owner, name


def parse_remote_url(url: str) -> Optional[Endpoint]:
    """
    Parse a remote URL as copied from git's configuration.

    Args:
        url: Raw remote URL, e.g. "git@github.com:owner/name.git"

    Returns:
        Endpoint, or None if the URL isn't on a supported host

    Raises:
        MalformedLocalRemoteError: If the host matched but there's no owner/name path
    """
    for host, transport, prefix in _PREFIXES:
        if not url.startswith(prefix):
            continue
        remainder = url[len(prefix):]
        if remainder.endswith(_REPO_SUFFIX):
            remainder = remainder[:-len(_REPO_SUFFIX)]
        parts = split_owner_and_name(remainder)
        if parts is None:
            raise MalformedLocalRemoteError(url)
        owner, name = parts
        return Endpoint(host=host, owner=owner, name=name, transport=transport, raw_url=url)

    logger.debug(f"Ignoring remote on unsupported host: {url}")
    return None

"""Provider-specific canonical resolution and fork listing.

GitLab reports only the immediate parent of a fork, so the canonical project
is found by walking forked_from_project links. GitHub reports the root of the
fork network directly as "source".
"""

import logging
from typing import Any, List, Optional, Protocol
from urllib.parse import quote

from ..config import (
    GITHUB_API_BASE,
    GITHUB_PAGE_SIZE,
    GITHUB_TOKEN_KEY,
    GITLAB_API_BASE,
    GITLAB_TOKEN_KEY,
)
from ..core.entities import CanonicalIdentity, ForkEntry
from ..remotes.url import Endpoint, HostKind, parse_remote_url
from ..utils.cancel import CancelToken, checkpoint
from ..utils.errors import (
    CyclicForkChainError,
    MalformedLocalRemoteError,
    MissingCredentialError,
    UnexpectedResponseError,
)
from .client import BasicCredential, Credential, Page, QueryTokenCredential
from .models import GitHubFork, GitHubRepository, GitLabFork, GitLabProject, require_list


logger = logging.getLogger(__name__)


class ApiClient(Protocol):
    """Anything that can GET a URL and return a Page (ProviderClient or a test fake)."""

    def get(self, url: str, credential: Optional[Credential] = None) -> Page:
        ...


class ProviderStrategy(Protocol):
    """Contract shared by the GitLab and GitHub strategies."""

    host: HostKind

    def resolve_canonical(self, owner: str, name: str) -> CanonicalIdentity:
        """Return the root repository for the seed owner/name."""
        ...

    def forks_url(self, canonical: CanonicalIdentity) -> str:
        """Return the URL of the first page of forks."""
        ...

    def fetch_page(self, url: str) -> Page:
        """GET one page with the provider's credential."""
        ...

    def decode_forks(self, data: Any, url: str) -> List[ForkEntry]:
        """Decode a page of fork entries."""
        ...


def endpoint_from_clone_url(clone_url: str, host: HostKind, field: str, url: Optional[str] = None) -> Endpoint:
    """Parse a clone URL returned by the API, insisting it's on the expected host."""
    try:
        endpoint = parse_remote_url(clone_url)
    except MalformedLocalRemoteError:
        endpoint = None
    if endpoint is None or endpoint.host is not host:
        raise UnexpectedResponseError(field, f"a {host.domain} clone URL", url)
    return endpoint


class GitLabStrategy:
    """Hierarchical forks: walk the forked_from_project chain to its root."""

    host = HostKind.GITLAB

    def __init__(self, client: ApiClient, token: Optional[str], cancel: Optional[CancelToken] = None,
                 api_base: str = GITLAB_API_BASE):
        if not token:
            raise MissingCredentialError(self.host.display_name, GITLAB_TOKEN_KEY, "read_api")
        self.client = client
        self.credential = QueryTokenCredential(token)
        self.cancel = cancel
        self.api_base = api_base.rstrip("/")

    def project_url(self, owner: str, name: str) -> str:
        # GitLab addresses projects by URL-encoded "namespace/name"
        return f"{self.api_base}/projects/{quote(owner, safe='')}%2F{quote(name, safe='')}"

    def fetch_page(self, url: str) -> Page:
        checkpoint(self.cancel, f"GET {url}")
        return self.client.get(url, self.credential)

    def resolve_canonical(self, owner: str, name: str) -> CanonicalIdentity:
        visited = {(owner.lower(), name.lower())}
        chain = [f"{owner}/{name}"]
        hops = 0
        while True:
            url = self.project_url(owner, name)
            project = GitLabProject(self.fetch_page(url).data, url)
            if not project.is_fork:
                endpoint = endpoint_from_clone_url(project.ssh_url, self.host, "ssh_url_to_repo", url)
                logger.info(f"Canonical {self.host.display_name} project is {owner}/{name} after {hops} hop(s)")
                return CanonicalIdentity(owner=owner, name=name, endpoint=endpoint, hops=hops)

            owner, name = project.parent
            chain.append(f"{owner}/{name}")
            key = (owner.lower(), name.lower())
            if key in visited:
                raise CyclicForkChainError(chain)
            visited.add(key)
            hops += 1
            logger.debug(f"{chain[-2]} is a fork of {chain[-1]}")

    def forks_url(self, canonical: CanonicalIdentity) -> str:
        return f"{self.project_url(canonical.owner, canonical.name)}/forks"

    def decode_forks(self, data: Any, url: str) -> List[ForkEntry]:
        entries = []
        for index, item in enumerate(require_list(data, url)):
            fork = GitLabFork(item, url)
            endpoint = endpoint_from_clone_url(fork.ssh_url, self.host, f"[{index}].ssh_url_to_repo", url)
            entries.append(ForkEntry(owner=fork.owner, endpoint=endpoint, subfork_count=fork.forks_count))
        return entries


class GitHubStrategy:
    """Flat fork metadata: the repository's "source" is the root of the network."""

    host = HostKind.GITHUB

    def __init__(self, client: ApiClient, token: Optional[str], cancel: Optional[CancelToken] = None,
                 api_base: str = GITHUB_API_BASE):
        self.client = client
        # Optional: unauthenticated requests work for public repositories
        self.credential = BasicCredential(token) if token else None
        if token and ":" not in token:
            logger.warning(f"{GITHUB_TOKEN_KEY} should be '<username>:<token>'")
        self.cancel = cancel
        self.api_base = api_base.rstrip("/")

    def repo_url(self, owner: str, name: str) -> str:
        return f"{self.api_base}/repos/{owner}/{name}"

    def fetch_page(self, url: str) -> Page:
        checkpoint(self.cancel, f"GET {url}")
        return self.client.get(url, self.credential)

    def resolve_canonical(self, owner: str, name: str) -> CanonicalIdentity:
        url = self.repo_url(owner, name)
        repo = GitHubRepository(self.fetch_page(url).data, url)
        field = "source.ssh_url" if repo.is_fork else "ssh_url"
        endpoint = endpoint_from_clone_url(repo.clone_url, self.host, field, url)
        logger.info(f"Canonical {self.host.display_name} repository is {repo.owner}/{repo.name}")
        return CanonicalIdentity(owner=repo.owner, name=repo.name, endpoint=endpoint, hops=1 if repo.is_fork else 0)

    def forks_url(self, canonical: CanonicalIdentity) -> str:
        return f"{self.repo_url(canonical.owner, canonical.name)}/forks?per_page={GITHUB_PAGE_SIZE}"

    def decode_forks(self, data: Any, url: str) -> List[ForkEntry]:
        entries = []
        for index, item in enumerate(require_list(data, url)):
            fork = GitHubFork(item, url)
            endpoint = endpoint_from_clone_url(fork.clone_url, self.host, f"[{index}].ssh_url", url)
            entries.append(ForkEntry(owner=fork.owner, endpoint=endpoint))
        return entries


def strategy_for(host: HostKind, client: ApiClient, settings, cancel: Optional[CancelToken] = None) -> ProviderStrategy:
    """Build the strategy for the seed's host with the matching token from settings."""
    if host is HostKind.GITLAB:
        return GitLabStrategy(client, settings.gitlab_token, cancel)
    return GitHubStrategy(client, settings.github_token, cancel)

"""Entities shared by the fork resolution engine and the remote installer."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..remotes.url import Endpoint


@dataclass(frozen=True)
class LocalRemote:
    """A remote already configured in the local repository."""

    owner: str
    name: str
    alias: str
    endpoint: Endpoint


class LocalRemoteTable:
    """
    Local remotes on supported hosts, keyed by owner.

    Keys keep the owner's original spelling but lookups ignore case, so a fork
    owned by "Fraser999" counts as local when "fraser999" is configured.
    """

    def __init__(self, remotes: Optional[List[LocalRemote]] = None):
        self._remotes: Dict[str, LocalRemote] = {}
        for remote in remotes or []:
            self.add(remote)

    def add(self, remote: LocalRemote) -> None:
        # A later remote for the same owner replaces the earlier one
        existing = self._find_key(remote.owner)
        if existing is not None:
            del self._remotes[existing]
        self._remotes[remote.owner] = remote

    def _find_key(self, owner: str) -> Optional[str]:
        lowered = owner.lower()
        for key in self._remotes:
            if key.lower() == lowered:
                return key
        return None

    def __contains__(self, owner: object) -> bool:
        return isinstance(owner, str) and self._find_key(owner) is not None

    def get(self, owner: str) -> Optional[LocalRemote]:
        key = self._find_key(owner)
        return self._remotes[key] if key is not None else None

    def __len__(self) -> int:
        return len(self._remotes)

    def __iter__(self) -> Iterator[LocalRemote]:
        return iter(self._remotes.values())

    @property
    def owners(self) -> List[str]:
        return list(self._remotes)

    def all_https(self) -> bool:
        return all(remote.endpoint.is_https for remote in self)


@dataclass(frozen=True)
class CanonicalIdentity:
    """The root repository all the forks descend from."""

    owner: str
    name: str
    endpoint: Endpoint
    hops: int = 0


@dataclass(frozen=True)
class ForkCandidate:
    """A fork (or the canonical upstream) not yet configured locally."""

    owner: str
    endpoint: Endpoint


@dataclass(frozen=True)
class ForkEntry:
    """One decoded entry of a forks listing page."""

    owner: str
    endpoint: Endpoint
    subfork_count: int = 0


@dataclass
class Resolution:
    """Output of the fork resolution engine."""

    canonical: CanonicalIdentity
    candidates: List[ForkCandidate]
    notes: List[str] = field(default_factory=list)

    @property
    def owners(self) -> List[str]:
        return [candidate.owner for candidate in self.candidates]

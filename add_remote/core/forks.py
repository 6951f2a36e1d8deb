"""Fork resolution engine.

Resolves the canonical upstream of the local repository, lists its forks,
drops the ones already configured as remotes, and suggests defaults for the
user's choices.
"""

import logging
from bisect import bisect_left
from typing import Callable, List, Optional

from ..config import DEFAULT_MAIN_FORK_ALIAS, Settings
from ..hosting.providers import ApiClient, ProviderStrategy, strategy_for
from ..known_aliases import known_alias
from ..utils.cancel import CancelToken
from ..utils.errors import NoSupportedRemotesError
from .entities import (
    CanonicalIdentity,
    ForkCandidate,
    LocalRemote,
    LocalRemoteTable,
    Resolution,
)


logger = logging.getLogger(__name__)

AliasLookup = Callable[[str], Optional[str]]


def choose_seed(local_remotes: LocalRemoteTable) -> LocalRemote:
    """
    Pick the local remote used as the starting point for resolution.

    The smallest owner wins, compared case-insensitively and then exactly, so
    the same checkout always resolves the same way.

    Raises:
        NoSupportedRemotesError: If the table is empty
    """
    if len(local_remotes) == 0:
        raise NoSupportedRemotesError()
    return min(local_remotes, key=lambda remote: (remote.owner.lower(), remote.owner))


def sort_candidates(candidates: List[ForkCandidate]) -> List[ForkCandidate]:
    """Stable sort by lower-cased owner; equal owners keep discovery order."""
    return sorted(candidates, key=lambda candidate: candidate.owner.lower())


def _find_owner(candidates: List[ForkCandidate], owner: str) -> Optional[int]:
    target = owner.lower()
    index = bisect_left(candidates, target, key=lambda candidate: candidate.owner.lower())
    if index < len(candidates) and candidates[index].owner.lower() == target:
        return index
    return None


def suggest_fork(candidates: List[ForkCandidate], canonical_owner: str,
                 preferred_fork: Optional[str] = None) -> Optional[int]:
    """
    Suggest an index into the sorted candidates as the default choice.

    Favours the only candidate if there's just one, then the canonical owner,
    then the configured preferred fork.

    Returns:
        Index into candidates, or None if nothing is suggested
    """
    if len(candidates) == 1:
        return 0
    index = _find_owner(candidates, canonical_owner)
    if index is not None:
        return index
    if preferred_fork:
        return _find_owner(candidates, preferred_fork)
    return None


def suggest_alias(candidate: ForkCandidate, canonical_owner: str, settings: Settings,
                  known_aliases: AliasLookup = known_alias) -> str:
    """Suggest the local alias for the chosen candidate."""
    if candidate.owner.lower() == canonical_owner.lower():
        return settings.main_fork_alias or DEFAULT_MAIN_FORK_ALIAS
    return settings.fork_alias(candidate.owner) or known_aliases(candidate.owner) or candidate.owner


def subfork_note(fork_url: str, canonical_url: str, count: int) -> str:
    plural = "s" if count > 1 else ""
    return f"{fork_url} which is a fork of {canonical_url} has {count} fork{plural} being ignored."


class ForkResolver:
    """Runs canonical resolution and fork enumeration for one session."""

    def __init__(
        self,
        client: ApiClient,
        local_remotes: LocalRemoteTable,
        settings: Settings,
        cancel: Optional[CancelToken] = None,
        strategy: Optional[ProviderStrategy] = None
    ):
        """
        Args:
            client: API client used by the provider strategy
            local_remotes: Remotes already configured locally
            settings: User configuration (tokens, preferred fork)
            cancel: Token checked before each request
            strategy: Override the strategy chosen from the seed's host
        """
        self.local_remotes = local_remotes
        self.settings = settings
        self.seed = choose_seed(local_remotes)
        self.strategy = strategy or strategy_for(self.seed.endpoint.host, client, settings, cancel)
        logger.debug(f"Seed remote '{self.seed.alias}' -> {self.seed.owner}/{self.seed.name}")

    def resolve_canonical(self) -> CanonicalIdentity:
        return self.strategy.resolve_canonical(self.seed.owner, self.seed.name)

    def enumerate_forks(self, canonical: CanonicalIdentity) -> Resolution:
        """
        Page through the forks of the canonical repository.

        Forks of forks are reported in the notes but never expanded.

        Returns:
            Resolution with candidates sorted by owner
        """
        candidates: List[ForkCandidate] = []
        notes: List[str] = []
        url: Optional[str] = self.strategy.forks_url(canonical)
        pages = 0

        while url:
            page = self.strategy.fetch_page(url)
            pages += 1
            for entry in self.strategy.decode_forks(page.data, url):
                if entry.subfork_count > 0 and entry.owner.lower() != canonical.owner.lower():
                    note = subfork_note(entry.endpoint.raw_url, canonical.endpoint.raw_url, entry.subfork_count)
                    logger.info(note)
                    notes.append(note)
                local = self.local_remotes.get(entry.owner)
                if local is not None:
                    logger.debug(f"Skipping {entry.owner}: already remote '{local.alias}'")
                    continue
                candidates.append(ForkCandidate(owner=entry.owner, endpoint=entry.endpoint))
            url = page.next_link

        # The upstream is always selectable, even with no forks
        if canonical.owner not in self.local_remotes:
            candidates.append(ForkCandidate(owner=canonical.owner, endpoint=canonical.endpoint))

        logger.info(f"Found {len(candidates)} available fork(s) across {pages} page(s)")
        return Resolution(canonical=canonical, candidates=sort_candidates(candidates), notes=notes)

    def resolve(self) -> Resolution:
        return self.enumerate_forks(self.resolve_canonical())

"""Tests for ranking and the default fork and alias suggestions."""

from add_remote.config import Settings
from add_remote.core.entities import ForkCandidate
from add_remote.core.forks import sort_candidates, suggest_alias, suggest_fork
from add_remote.known_aliases import known_alias
from add_remote.remotes.url import parse_remote_url


def candidates(*owners):
    return [ForkCandidate(owner, parse_remote_url(f"git@github.com:{owner}/proj.git")) for owner in owners]


def owners_of(items):
    return [item.owner for item in items]


class TestSorting:
    """Test candidate ordering."""

    def test_sort_is_case_insensitive(self):
        result = sort_candidates(candidates("zeta", "Bob", "alice"))

        assert owners_of(result) == ["alice", "Bob", "zeta"]

    def test_sort_is_stable(self):
        """Owners equal ignoring case keep discovery order."""
        result = sort_candidates(candidates("BOB", "alice", "bob"))

        assert owners_of(result) == ["alice", "BOB", "bob"]

    def test_resorting_is_a_no_op(self):
        once = sort_candidates(candidates("m", "A", "z", "b", "B"))

        assert sort_candidates(once) == once


class TestSuggestFork:
    """Test the default fork index."""

    def test_canonical_owner_is_suggested(self):
        assert suggest_fork(candidates("alice", "bob", "zeta"), "bob") == 1

    def test_single_candidate_always_suggested(self):
        assert suggest_fork(candidates("zeta"), "bob") == 0
        assert suggest_fork(candidates("zeta"), "zeta") == 0

    def test_canonical_owner_case_insensitive(self):
        assert suggest_fork(candidates("alice", "Bob", "zeta"), "BOB") == 1

    def test_preferred_fork_when_upstream_is_local(self):
        assert suggest_fork(candidates("alice", "bob", "CasperLabs", "zeta"), "upstream", "casperlabs") == 2

    def test_canonical_beats_preferred(self):
        assert suggest_fork(candidates("alice", "bob", "zeta"), "zeta", "alice") == 2

    def test_no_suggestion(self):
        assert suggest_fork(candidates("alice", "bob"), "carol", "dave") is None
        assert suggest_fork(candidates("alice", "bob"), "carol") is None

    def test_empty_list(self):
        assert suggest_fork([], "bob") is None


class TestSuggestAlias:
    """Test the default alias."""

    def test_canonical_defaults_to_upstream(self):
        candidate = candidates("Owner")[0]

        assert suggest_alias(candidate, "owner", Settings()) == "upstream"

    def test_canonical_uses_main_fork_alias(self):
        candidate = candidates("owner")[0]

        assert suggest_alias(candidate, "owner", Settings(main_fork_alias="main")) == "main"

    def test_configured_owner_alias(self):
        candidate = candidates("DAVE")[0]
        settings = Settings(fork_aliases={"dave": "David"})

        assert suggest_alias(candidate, "upstream-owner", settings) == "David"

    def test_configured_alias_beats_known_alias(self):
        candidate = candidates("dirvine")[0]
        settings = Settings(fork_aliases={"dirvine": "Dave"})

        assert suggest_alias(candidate, "maidsafe", settings) == "Dave"

    def test_known_alias_lookup(self):
        candidate = candidates("Fraser999")[0]

        assert suggest_alias(candidate, "maidsafe", Settings()) == "Fraser"

    def test_injected_lookup(self):
        candidate = candidates("carol")[0]

        alias = suggest_alias(candidate, "up", Settings(), known_aliases={"carol": "Caz"}.get)

        assert alias == "Caz"

    def test_falls_back_to_owner(self):
        candidate = candidates("someone")[0]

        assert suggest_alias(candidate, "up", Settings(), known_aliases=lambda owner: None) == "someone"


def test_known_alias_table():
    assert known_alias("ustulation") == "Spandan"
    assert known_alias("nobody-in-particular") is None

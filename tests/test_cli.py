"""End-to-end tests for the command line interface with git and the network stubbed."""

from unittest.mock import patch

import typer
from typer.testing import CliRunner

from add_remote.cli import app
from add_remote.config import __version__
from add_remote.hosting.client import Page
from add_remote.utils.errors import NoSupportedRemotesError
from conftest import FakeApiClient, FakeGit, remote_table


runner = CliRunner()

GITHUB = "https://api.github.com/repos"

BEFORE = "origin\tgit@github.com:me/proj.git (fetch)\norigin\tgit@github.com:me/proj.git (push)"


class SessionGit(FakeGit):
    """FakeGit that also reports the local remotes."""

    def __init__(self, table, **kwargs):
        super().__init__(**kwargs)
        self.table = table

    def build_local_remote_table(self):
        return self.table


def github_routes(fork_owners):
    return {
        f"{GITHUB}/me/proj": {
            "owner": {"login": "me"},
            "name": "proj",
            "ssh_url": "git@github.com:me/proj.git",
            "source": {"owner": {"login": "up"}, "name": "proj", "ssh_url": "git@github.com:up/proj.git"},
        },
        f"{GITHUB}/up/proj/forks?per_page=100": Page([
            {"owner": {"login": owner}, "ssh_url": f"git@github.com:{owner}/proj.git"} for owner in fork_owners
        ]),
    }


def invoke(git, client, user_input=""):
    with patch("add_remote.cli.GitAdapter", return_value=git), \
         patch("add_remote.cli.ProviderClient", return_value=client):
        return runner.invoke(app, [], input=user_input)


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_accepting_defaults_adds_upstream():
    """Hitting return twice adds the upstream under "upstream"."""
    after = "upstream\tgit@github.com:up/proj.git (fetch)\nupstream\tdisable_push (push)\n" + BEFORE
    git = SessionGit(
        remote_table(("origin", "git@github.com:me/proj.git")),
        remotes_before=BEFORE,
        remotes_after=after,
        branches={"upstream": "  upstream/main 1234567 Initial commit"},
    )
    client = FakeApiClient(github_routes(["alice", "bob"]))

    result = invoke(git, client, "\n\n")

    assert result.exit_code == 0, result.output
    assert "Available forks:" in result.output
    assert "0  alice" in result.output
    assert "2  up" in result.output
    assert ("remote add", "upstream", "git@github.com:up/proj.git") in git.calls
    assert ("remote set-url --push", "upstream", "disable_push") in git.calls
    assert "upstream/main" in result.output
    # Accepting the suggested alias doesn't offer to store it
    assert not any(call[0] == "config --global" for call in git.calls)


def test_custom_alias_offered_for_global_config():
    git = SessionGit(
        remote_table(("origin", "git@github.com:me/proj.git")),
        remotes_before=BEFORE,
        remotes_after=BEFORE,
    )
    client = FakeApiClient(github_routes(["alice", "bob"]))

    result = invoke(git, client, "1\nBobby\n\n")

    assert result.exit_code == 0, result.output
    assert ("config --global", "add-remote.forkAlias.bob", "Bobby") in git.calls
    assert ("remote add", "Bobby", "git@github.com:bob/proj.git") in git.calls
    assert "successfully set" in result.output


def test_out_of_range_index_is_rejected():
    git = SessionGit(
        remote_table(("origin", "git@github.com:me/proj.git")),
        remotes_before=BEFORE,
        remotes_after=BEFORE,
    )
    client = FakeApiClient(github_routes(["alice"]))

    result = invoke(git, client, "7\n0\n\n")

    assert result.exit_code == 0, result.output
    assert "Must be one of the listed indices." in result.output
    assert ("remote add", "alice", "git@github.com:alice/proj.git") in git.calls


def test_no_forks_available():
    """When every fork is already a remote, the existing remotes are shown instead."""
    git = SessionGit(
        remote_table(("origin", "git@github.com:me/proj.git"), ("upstream", "git@github.com:up/proj.git")),
        remotes_before=BEFORE,
    )
    routes = github_routes([])
    client = FakeApiClient(routes)

    result = invoke(git, client)

    assert result.exit_code == 0, result.output
    assert "There are no forks available which aren't already a remote:" in result.output
    assert "origin\tgit@github.com:me/proj.git (fetch)" in result.output
    assert not any(call[0] == "remote add" for call in git.calls)


def test_fatal_error_sets_exit_status():
    class NoRemotesGit(SessionGit):
        def build_local_remote_table(self):
            raise NoSupportedRemotesError(["origin"])

    result = invoke(NoRemotesGit(None), FakeApiClient())

    assert result.exit_code == 2
    assert "hosted on GitLab or GitHub" in result.output


class TestInterrupt:
    """Interrupting a prompt ends the session with the cancellation status."""

    def make_session(self):
        git = SessionGit(
            remote_table(("origin", "git@github.com:me/proj.git")),
            remotes_before=BEFORE,
            remotes_after=BEFORE,
        )
        return git, FakeApiClient(github_routes(["alice", "bob"]))

    def test_abort_at_prompt_exits_130(self):
        """click turns Ctrl-C at a prompt into Abort."""
        git, client = self.make_session()

        with patch("add_remote.cli.typer.prompt", side_effect=typer.Abort()):
            result = invoke(git, client)

        assert result.exit_code == 130
        assert "Cancelled" in result.output
        assert not any(call[0] == "remote add" for call in git.calls)

    def test_keyboard_interrupt_exits_130(self):
        git, client = self.make_session()

        with patch("add_remote.cli.typer.prompt", side_effect=KeyboardInterrupt):
            result = invoke(git, client)

        assert result.exit_code == 130
        assert not any(call[0] == "remote add" for call in git.calls)

    def test_end_of_input_at_prompt_exits_130(self):
        git, client = self.make_session()

        result = invoke(git, client, "")

        assert result.exit_code == 130
        assert git.calls == []

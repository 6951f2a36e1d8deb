"""add-remote command line interface.

Adds a fork of the current repository as a fetch-only remote. Run from inside
a git checkout whose remotes point at GitLab or GitHub; the forks not yet
configured locally are listed, and the chosen one is added under an alias.
"""

from typing import Optional

import typer

from .config import FORK_ALIAS_PREFIX, __version__, load_settings
from .core.entities import Resolution
from .core.forks import AliasLookup, ForkResolver, suggest_alias, suggest_fork
from .core.installer import InstallResult, RemoteInstaller, choose_url
from .git_ops.git import GitAdapter
from .hosting.client import ProviderClient
from .known_aliases import known_alias
from .utils.cancel import CancelToken, install_sigint_handler, restore_sigint_handler
from .utils.errors import AddRemoteError, OperationCancelled, VcsCommandError
from .utils.logging_config import get_logger, setup_logging


logger = get_logger(__name__)

app = typer.Typer(
    add_completion=False,
    help="Add a remote fork to a local Git repository.  Queries GitLab or GitHub for the full list "
         "of forks and offers simple choices for adding one under a local alias.  The added fork "
         "is configured with a pull-url only; the push-url is disabled.",
)


def show_available_forks(resolution: Resolution) -> None:
    typer.echo("Available forks:")
    width = len(str(len(resolution.candidates))) + 2
    for index, owner in enumerate(resolution.owners):
        typer.echo(f"{index:<{width}}{owner}")
    for note in resolution.notes:
        typer.secho(note, fg=typer.colors.YELLOW)


def choose_fork(resolution: Resolution, default: Optional[int]) -> int:
    """Ask for the index of the fork to add until a listed one is entered."""
    while True:
        value = typer.prompt(
            typer.style("Choose fork (enter index number)", fg=typer.colors.YELLOW),
            default=default,
            type=int,
        )
        if 0 <= value < len(resolution.candidates):
            return value
        typer.secho("Must be one of the listed indices.", fg=typer.colors.RED)


def choose_alias(default: str) -> str:
    value = typer.prompt(
        typer.style("Choose name to assign to remote", fg=typer.colors.YELLOW),
        default=default,
    )
    return value.strip() or default


def offer_to_set_alias(git: GitAdapter, owner: str, alias: str) -> None:
    """Offer to remember a custom alias for this owner in the global git config."""
    question = f"Do you want to set this alias '{owner}' -> '{alias}' in your global git-config?"
    if not typer.confirm(typer.style(question, fg=typer.colors.YELLOW), default=True):
        return
    key = f"{FORK_ALIAS_PREFIX}.{owner}"
    try:
        git.set_global_config(key, alias)
    except VcsCommandError as e:
        typer.secho(f"Failed to run 'git config --global --replace-all {key} {alias}'", fg=typer.colors.RED)
        logger.warning(e.diagnostic())
        return
    typer.secho(f"Alias '{owner}' -> '{alias}' successfully set in your global git-config", fg=typer.colors.GREEN)


def show_install_result(result: InstallResult) -> None:
    for line, is_new in result.remote_lines:
        if is_new:
            typer.secho(line, fg=typer.colors.CYAN)
        else:
            typer.echo(line)
    typer.echo(f"\n{result.branches}")


def run_session(
    git: GitAdapter,
    client: ProviderClient,
    cancel: Optional[CancelToken] = None,
    known_aliases: AliasLookup = known_alias
) -> None:
    """
    Run one complete add-remote session.

    Raises:
        AddRemoteError: On any fatal condition
    """
    settings = load_settings(git)
    local_remotes = git.build_local_remote_table()

    resolver = ForkResolver(client, local_remotes, settings, cancel)
    resolution = resolver.resolve()

    if not resolution.candidates:
        typer.secho("There are no forks available which aren't already a remote:", fg=typer.colors.YELLOW)
        typer.echo(git.remotes_verbose())
        return

    show_available_forks(resolution)
    canonical_owner = resolution.canonical.owner
    index = choose_fork(resolution, suggest_fork(resolution.candidates, canonical_owner, settings.preferred_fork))
    candidate = resolution.candidates[index]

    suggested = suggest_alias(candidate, canonical_owner, settings, known_aliases)
    alias = choose_alias(suggested)
    if alias != suggested:
        offer_to_set_alias(git, candidate.owner, alias)

    typer.echo()
    typer.secho(f"Fetching from {choose_url(candidate.endpoint, local_remotes).raw_url}\n", fg=typer.colors.CYAN)
    result = RemoteInstaller(git, local_remotes, cancel).install(candidate.endpoint, alias)
    show_install_result(result)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.command()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=_version_callback, is_eager=True,
        help="Show the version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Write debug logs to stderr."),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to this file."),
) -> None:
    """Add a fork of this repository as a new remote."""
    setup_logging(log_file=log_file, verbose=verbose)
    logger.info(f"add-remote {__version__} starting")

    cancel = CancelToken()
    previous_handler = install_sigint_handler(cancel)
    try:
        run_session(GitAdapter(), ProviderClient(), cancel)
    except AddRemoteError as e:
        typer.secho(e.diagnostic(), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=e.exit_code)
    except (KeyboardInterrupt, typer.Abort):
        # click reports Ctrl-C or EOF at a prompt as Abort
        logger.info(f"Interrupted (cancel requested: {cancel.cancelled})")
        typer.secho("Cancelled", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=OperationCancelled.exit_code)
    finally:
        restore_sigint_handler(previous_handler)


if __name__ == "__main__":
    app()

"""Command-line interface (CLI) for mercator."""

# pylint: disable=no-value-for-parameter
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TypedDict

import click
from typing_extensions import Unpack

from mercator.clone import clone_repo_async
from mercator.config import KEY_PASSPHRASE_ENV_VAR, KNOWN_HOSTS_ENV_VAR, LOG_LEVEL
from mercator.schemas import CloneConfig, CloneOptions
from mercator.utils.exceptions import CloneError
from mercator.utils.logging_config import configure_logging, get_logger

# Initialize logger for this module
logger = get_logger(__name__)


class _CLIArgs(TypedDict):
    url: str
    destination: str
    branch: str | None
    key_file: Path | None
    passphrase: str | None
    known_hosts: str | None
    quiet: bool


@click.group()
@click.option(
    "--log-level",
    default=LOG_LEVEL,
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level written to stderr.",
)
def main(log_level: str) -> None:
    """Fetch project sources from Git repositories."""
    configure_logging(log_level)


@main.command()
@click.argument("url", type=str)
@click.argument("destination", type=click.Path(file_okay=False))
@click.option("--branch", "-b", default=None, help="Branch to clone (default: the remote's default branch)")
@click.option(
    "--key-file",
    "-k",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="PEM or OpenSSH private key used to authenticate over SSH.",
)
@click.option(
    "--passphrase",
    "-p",
    envvar=KEY_PASSPHRASE_ENV_VAR,
    default=None,
    help=f"Passphrase for the private key. If omitted, the CLI will look for the {KEY_PASSPHRASE_ENV_VAR} variable.",
)
@click.option(
    "--known-hosts",
    envvar=KNOWN_HOSTS_ENV_VAR,
    type=click.Path(dir_okay=False),
    default=None,
    help=f"known_hosts file used to verify the remote host key. Defaults to ${KNOWN_HOSTS_ENV_VAR} when set.",
)
@click.option("--quiet", "-q", is_flag=True, default=False, help="Do not print transfer progress.")
def clone(**cli_kwargs: Unpack[_CLIArgs]) -> None:
    """Clone a branch of the repository at URL into DESTINATION.

    Examples
    --------
    Public repository:
        $ mercator clone https://github.com/user/repo ./projects/repo -b main

    Private repository over SSH:
        $ mercator clone git@github.com:user/private-repo.git ./projects/repo -b main -k ~/.ssh/deploy_key
        $ SSH_KNOWN_HOSTS=./etc/known_hosts mercator clone git@github.com:user/repo.git ./repo -k key

    """
    asyncio.run(_async_main(**cli_kwargs))


async def _async_main(
    url: str,
    destination: str,
    *,
    branch: str | None = None,
    key_file: Path | None = None,
    passphrase: str | None = None,
    known_hosts: str | None = None,
    quiet: bool = False,
) -> None:
    """Build the clone request from the CLI arguments and run it.

    Raises
    ------
    click.Abort
        Raised if the clone fails and the command must be aborted.

    """
    try:
        options = CloneOptions(
            pem_bytes=key_file.read_bytes() if key_file else b"",
            pem_password=passphrase,
        )
        config = CloneConfig(
            url=url,
            local_path=destination,
            branch=branch,
            options=options,
            known_hosts_path=known_hosts,
            show_progress=not quiet,
        )
        await clone_repo_async(config)
    except CloneError as exc:
        click.echo(f"Error ({exc.kind}): {exc}", err=True)
        raise click.Abort from exc
    except Exception as exc:
        # Convert any exception into Click.Abort so that exit status is non-zero
        click.echo(f"Error: {exc}", err=True)
        raise click.Abort from exc

    click.echo(f"Cloned {url} into {destination}")


if __name__ == "__main__":
    main()

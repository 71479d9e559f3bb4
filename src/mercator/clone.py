"""Module containing functions for cloning a Git repository to a local path."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import git

from mercator.config import DEFAULT_TIMEOUT
from mercator.utils.exceptions import RepositoryAlreadyExistsError
from mercator.utils.git_utils import (
    BRANCH_REF_PREFIX,
    StdoutProgress,
    branch_reference_name,
    classify_git_error,
    ensure_git_installed,
    resolve_branch_reference,
    resolve_default_branch,
    short_branch_name,
)
from mercator.utils.logging_config import get_logger
from mercator.utils.os_utils import (
    ensure_directory_exists_or_create,
    is_empty_directory,
    is_initialized_repository,
    normalize_path,
)
from mercator.utils.ssh_utils import ssh_auth_context
from mercator.utils.timeout_wrapper import async_timeout, run_in_daemon_thread

if TYPE_CHECKING:
    from mercator.schemas import CloneConfig

# Initialize logger for this module
logger = get_logger(__name__)


def clone_repo(config: CloneConfig) -> None:
    """Clone a single branch of a repository to a local path.

    The destination is created if it does not exist. A destination that already holds files but no
    repository is initialized in place and the branch is checked out over the existing files.
    When key material is supplied the clone
    authenticates over SSH as the ``git`` user; otherwise git attempts anonymous access.
    A failed clone may leave a partially populated destination behind.

    Parameters
    ----------
    config : CloneConfig
        The configuration for cloning the repository.

    Raises
    ------
    RepositoryAlreadyExistsError
        If the destination already holds an initialized repository.
    InvalidKeyError
        If the supplied private key cannot be parsed or decrypted.
    ReferenceNotFoundError
        If the requested branch does not exist on the remote.
    AuthenticationRequiredError
        If the remote rejects access, including when the repository does not exist.
    TransportError
        If the remote cannot be reached or the transfer fails.
    OSError
        If the destination directory cannot be created.
    git.GitCommandError
        If git fails for any other reason.

    """
    url: str = config.url
    branch: str | None = config.branch or None
    local_path = Path(normalize_path(config.local_path))

    logger.info(
        "Starting git clone operation",
        extra={
            "url": url,
            "local_path": str(local_path),
            "branch": branch,
            "ssh_key": config.options.has_key,
        },
    )

    ensure_directory_exists_or_create(local_path)

    if is_initialized_repository(local_path):
        logger.error("Destination already holds a repository", extra={"local_path": str(local_path)})
        raise RepositoryAlreadyExistsError

    ensure_git_installed()

    with ssh_auth_context(url, config.options, config.known_hosts_path) as (env, auth_url):
        checkout_branch: str | None = None
        if branch:
            commit = resolve_branch_reference(auth_url, branch, env=env)
            logger.debug("Resolved branch", extra={"ref": branch_reference_name(branch), "commit": commit})
            checkout_branch = short_branch_name(branch)

        populated = not is_empty_directory(local_path)
        if populated and checkout_branch is None:
            checkout_branch = resolve_default_branch(auth_url, env=env)

        progress = StdoutProgress() if config.show_progress else None

        logger.info(
            "Executing git clone operation",
            extra={"url": url, "local_path": str(local_path), "in_place": populated},
        )
        try:
            if populated:
                _clone_in_place(auth_url, local_path, checkout_branch, env=env, progress=progress)
            else:
                clone_kwargs = {"branch": checkout_branch} if checkout_branch else {}
                git.Repo.clone_from(auth_url, str(local_path), progress=progress, env=env, **clone_kwargs)
        except git.GitCommandError as exc:
            extra_lines = [*progress.error_lines, *progress.other_lines] if progress else []
            classified = classify_git_error(exc, extra_lines)
            if classified is None:
                logger.error("Git clone failed", extra={"url": url, "status": exc.status})
                raise
            logger.error("Git clone failed", extra={"url": url, "kind": str(classified.kind)})
            raise classified from exc

    logger.info("Git clone operation completed successfully", extra={"local_path": str(local_path)})


def _clone_in_place(
    url: str,
    local_path: Path,
    branch: str,
    *,
    env: dict[str, str],
    progress: StdoutProgress | None,
) -> None:
    """Turn a populated directory into a clone of ``branch``.

    ``git clone`` refuses non-empty destinations, so the repository is initialized in place, the
    branch is fetched from ``origin`` and checked out as a tracking branch. Untracked files that the
    checkout would overwrite make it fail.
    """
    repo = git.Repo.init(local_path)
    try:
        with repo.git.custom_environment(**env):
            origin = repo.create_remote("origin", url)
            origin.fetch(f"+{BRANCH_REF_PREFIX}{branch}:refs/remotes/origin/{branch}", progress=progress)
            repo.git.checkout("--track", "-B", branch, f"origin/{branch}")
    finally:
        repo.close()


@async_timeout(DEFAULT_TIMEOUT)
async def clone_repo_async(config: CloneConfig) -> None:
    """Run ``clone_repo`` on a worker thread, giving up after ``DEFAULT_TIMEOUT`` seconds.

    The clone runs on a daemon thread, so a timed out clone does not keep the event loop or the
    interpreter from shutting down. The git process itself is not interrupted; the caller owns
    cleanup of the destination.

    Parameters
    ----------
    config : CloneConfig
        The configuration for cloning the repository.

    Raises
    ------
    AsyncTimeoutError
        If the clone does not finish in time.

    """
    await run_in_daemon_thread(clone_repo, config)

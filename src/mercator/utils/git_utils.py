"""Utility functions for interacting with Git repositories."""

from __future__ import annotations

import re
import sys
from typing import TYPE_CHECKING, Final, Iterable, TextIO

import git

from mercator.utils.exceptions import (
    AuthenticationRequiredError,
    CloneError,
    ReferenceNotFoundError,
    TransportError,
)
from mercator.utils.logging_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = get_logger(__name__)

BRANCH_REF_PREFIX: Final[str] = "refs/heads/"
_SYMREF_PREFIX: Final[str] = "ref: "

_REFERENCE_NOT_FOUND_PATTERNS: Final = re.compile(
    r"Remote branch .* not found|couldn't find remote ref",
    re.IGNORECASE,
)
_AUTH_REQUIRED_PATTERNS: Final = re.compile(
    r"Authentication failed"
    r"|could not read (?:Username|Password)"
    r"|terminal prompts disabled"
    r"|Permission denied \("
    r"|Repository not found"
    r"|repository '[^']*' not found"
    r"|Access denied"
    r"|returned error: 40[13]",
    re.IGNORECASE,
)
_TRANSPORT_FAILURE_PATTERNS: Final = re.compile(
    r"Could not resolve host"
    r"|Connection refused"
    r"|Connection timed out"
    r"|Network is unreachable"
    r"|Host key verification failed"
    r"|early EOF"
    r"|unable to access"
    r"|Could not read from remote repository"
    r"|does not appear to be a git repository"
    r"|repository '[^']*' does not exist",
    re.IGNORECASE,
)
# GitPython renders stderr as ``\n  stderr: '<output>'``
_GIT_OUTPUT_PREFIX: Final = re.compile(r"^(?:stderr: ')?(?:(?:fatal|error): )?")


def branch_reference_name(branch: str) -> str:
    """Return the full reference name of a branch.

    Parameters
    ----------
    branch : str
        A short branch name such as ``main``. Names that are already full references are kept.

    Returns
    -------
    str
        The reference name, e.g. ``refs/heads/main``.

    """
    if branch.startswith(BRANCH_REF_PREFIX):
        return branch
    return f"{BRANCH_REF_PREFIX}{branch}"


def short_branch_name(branch: str) -> str:
    """Return the branch name without its ``refs/heads/`` prefix, as ``git clone --branch`` expects it."""
    return branch.removeprefix(BRANCH_REF_PREFIX)


def ensure_git_installed() -> None:
    """Ensure Git is installed and accessible on the system.

    Raises
    ------
    RuntimeError
        If Git is not installed or not accessible.

    """
    try:
        git_cmd = git.Git()
        version = git_cmd.version()
    except (git.GitCommandError, git.GitCommandNotFound, OSError) as exc:
        msg = "Git is not installed or not accessible. Please install Git first."
        raise RuntimeError(msg) from exc

    logger.debug("Found git", extra={"version": version})


def resolve_branch_reference(url: str, branch: str, *, env: Mapping[str, str] | None = None) -> str:
    """Return the commit SHA the branch points to in the remote repository.

    Parameters
    ----------
    url : str
        The URL of the remote repository.
    branch : str
        The branch name, short (``main``) or as a full reference (``refs/heads/main``).
    env : Mapping[str, str] | None
        Environment overrides for git (authentication, prompts).

    Returns
    -------
    str
        The commit SHA.

    Raises
    ------
    ReferenceNotFoundError
        If the branch does not exist in the remote repository.
    CloneError
        If the remote cannot be listed for a classified reason.
    git.GitCommandError
        If listing the remote fails for any other reason.

    """
    ref_name = branch_reference_name(branch)
    output = _ls_remote(url, ref_name, env=env)

    sha = _pick_ref_sha(output.splitlines(), ref_name)
    if sha is None:
        logger.info("Branch not found on remote", extra={"url": url, "ref": ref_name})
        raise ReferenceNotFoundError

    return sha


def resolve_default_branch(url: str, *, env: Mapping[str, str] | None = None) -> str:
    """Return the short name of the branch the remote's ``HEAD`` points to.

    Parameters
    ----------
    url : str
        The URL of the remote repository.
    env : Mapping[str, str] | None
        Environment overrides for git (authentication, prompts).

    Returns
    -------
    str
        The default branch, e.g. ``main``.

    Raises
    ------
    ReferenceNotFoundError
        If the remote has no default branch, e.g. because it is empty.

    """
    output = _ls_remote(url, "HEAD", env=env, symref=True)
    for ln in output.splitlines():
        if ln.startswith(_SYMREF_PREFIX):
            target, _, _ = ln[len(_SYMREF_PREFIX) :].partition("\t")
            return short_branch_name(target.strip())

    logger.info("Remote has no default branch", extra={"url": url})
    raise ReferenceNotFoundError


def _ls_remote(url: str, *patterns: str, env: Mapping[str, str] | None = None, **options: bool) -> str:
    """Run ``git ls-remote`` against ``url``, raising classified errors where possible."""
    git_cmd = git.Git()
    try:
        with git_cmd.custom_environment(**(env or {})):
            return git_cmd.ls_remote(url, *patterns, **options)
    except git.GitCommandError as exc:
        classified = classify_git_error(exc)
        if classified is None:
            raise
        raise classified from exc


def _pick_ref_sha(lines: Iterable[str], ref_name: str) -> str | None:
    """Return the SHA of the ``git ls-remote`` line for exactly ``ref_name``.

    ``ls-remote`` patterns match on trailing path components, so ``refs/heads/main``
    also selects ``refs/heads/feature/refs/heads/main``.
    """
    for ln in lines:
        if not ln.strip():
            continue
        sha, ref = ln.split(maxsplit=1)
        if ref.strip() == ref_name:
            return sha
    return None


def classify_git_error(exc: git.GitCommandError, extra_lines: Iterable[str] = ()) -> CloneError | None:
    """Translate a git failure into one of the stable error kinds.

    Parameters
    ----------
    exc : git.GitCommandError
        The error raised by GitPython.
    extra_lines : Iterable[str]
        Additional stderr lines git produced, e.g. those consumed by a progress handler.

    Returns
    -------
    CloneError | None
        The classified error, or ``None`` if the failure does not match a known kind.

    """
    text = "\n".join([str(exc.stderr or ""), *extra_lines])

    if _REFERENCE_NOT_FOUND_PATTERNS.search(text):
        return ReferenceNotFoundError()
    # Order matters: hosts print "Could not read from remote repository" after both
    # authentication and network failures, so authentication is matched first.
    if _AUTH_REQUIRED_PATTERNS.search(text):
        return AuthenticationRequiredError()
    transport_failure = _TRANSPORT_FAILURE_PATTERNS.search(text)
    if transport_failure:
        return TransportError(_message_line(text, transport_failure.start()))
    return None


def _message_line(text: str, pos: int) -> str:
    """Return the git output line containing ``pos`` without its ``fatal:``/``error:`` prefix."""
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    line = text[start : end if end != -1 else len(text)].strip()
    line = _GIT_OUTPUT_PREFIX.sub("", line)
    return line.rstrip("'").strip()


class StdoutProgress(git.RemoteProgress):
    """Progress handler that echoes git's transfer progress to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self._stream = stream or sys.stdout

    def update(
        self,
        op_code: int,  # noqa: ARG002
        cur_count: str | float,  # noqa: ARG002
        max_count: str | float | None = None,  # noqa: ARG002
        message: str = "",  # noqa: ARG002
    ) -> None:
        """Write the current progress line."""
        self._stream.write(f"{self._cur_line}\n")
        self._stream.flush()

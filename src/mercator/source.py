"""Object interface over the cloner for callers that hold a source implementation."""

from __future__ import annotations

from typing import Protocol

from mercator.clone import clone_repo
from mercator.schemas import CloneConfig, CloneOptions


class Source(Protocol):
    """A place project sources can be fetched from."""

    def clone(self, repo_url: str, branch: str, project_root: str, options: CloneOptions | None = None) -> None:
        """Materialize ``branch`` of ``repo_url`` under ``project_root``."""


class GitSource:
    """Source backed by a git repository.

    Parameters
    ----------
    known_hosts_path : str | None
        ``known_hosts`` file used to verify remote host keys over SSH.
    show_progress : bool
        Whether clones stream transfer progress to ``stdout``.

    """

    def __init__(self, known_hosts_path: str | None = None, *, show_progress: bool = True) -> None:
        self.known_hosts_path = known_hosts_path
        self.show_progress = show_progress

    def clone(self, repo_url: str, branch: str, project_root: str, options: CloneOptions | None = None) -> None:
        """Clone ``branch`` of ``repo_url`` into ``project_root``.

        See ``mercator.clone.clone_repo`` for the errors raised.
        """
        config = CloneConfig(
            url=repo_url,
            branch=branch,
            local_path=project_root,
            options=options or CloneOptions(),
            known_hosts_path=self.known_hosts_path,
            show_progress=self.show_progress,
        )
        clone_repo(config)


def new(known_hosts_path: str | None = None) -> GitSource:
    """Return a ``GitSource`` verifying host keys against ``known_hosts_path``."""
    return GitSource(known_hosts_path)

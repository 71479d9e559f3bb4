"""mercator: clone a branch of a Git repository into a project directory."""

from mercator.clone import clone_repo, clone_repo_async
from mercator.schemas import CloneConfig, CloneOptions
from mercator.source import GitSource, Source
from mercator.utils.exceptions import CloneError, CloneErrorKind

__all__ = [
    "CloneConfig",
    "CloneError",
    "CloneErrorKind",
    "CloneOptions",
    "GitSource",
    "Source",
    "clone_repo",
    "clone_repo_async",
]

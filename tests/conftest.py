"""Fixtures for tests.

This file provides shared fixtures for building throw-away local Git repositories to clone from, generating
SSH private keys, and mocking the GitPython entry points used by the cloner.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict
from unittest.mock import MagicMock

import git
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, rsa

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

TreeFunc = Callable[[Path], Dict[str, bytes]]

DEMO_URL = "https://github.com/user/repo"
DEMO_SSH_URL = "git@github.com:user/private-repo.git"
DEMO_COMMIT = "deadbeefdeadbeefdeadbeefdeadbeefdeadbeef"
KEY_PASSPHRASE = "correct horse battery staple"

MAIN_FILES = {
    "LICENSE": "MIT License\n",
    "README.md": "# mercator-test\n",
}
FOLDER_STRUCTURE_FILES = {
    "dir1/file1": "file1\n",
    "dir1/file2": "file2\n",
    "dir1/file3": "file3\n",
    "dir2/dirA/dirAA/file4": "file4\n",
}

_ACTOR = git.Actor("Mercator Tests", "tests@example.com")


def _commit_files(repo: git.Repo, files: dict[str, str], message: str) -> None:
    root = Path(repo.working_tree_dir)
    paths = []
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        paths.append(str(path))
    repo.index.add(paths)
    repo.index.commit(message, author=_ACTOR, committer=_ACTOR)


@pytest.fixture
def source_repo(tmp_path: Path) -> Path:
    """Create a local repository to clone from.

    The repository has two branches:
    main
    ├── LICENSE
    └── README.md
    test_folder_structure (main plus)
    ├── dir1/
    │   ├── file1
    │   ├── file2
    │   └── file3
    └── dir2/
        └── dirA/
            └── dirAA/
                └── file4

    Parameters
    ----------
    tmp_path : Path
        The temporary directory path provided by the ``tmp_path`` fixture.

    Returns
    -------
    Path
        The path to the repository, usable as a clone URL.

    """
    repo_path = tmp_path / "remote" / "mercator-test"
    repo = git.Repo.init(repo_path, initial_branch="main")
    _commit_files(repo, MAIN_FILES, "Initial commit")

    feature = repo.create_head("test_folder_structure")
    feature.checkout()
    _commit_files(repo, FOLDER_STRUCTURE_FILES, "Add folder structure")
    repo.heads.main.checkout()

    repo.close()
    return repo_path


@pytest.fixture
def destination(tmp_path: Path) -> Path:
    """Return a not yet existing project directory to clone into."""
    return tmp_path / "mercator" / "projects" / "proj1"


@pytest.fixture
def tree() -> TreeFunc:
    """Return a helper mapping every file below a directory (outside ``.git``) to its content."""

    def _tree(root: Path) -> dict[str, bytes]:
        return {
            path.relative_to(root).as_posix(): path.read_bytes()
            for path in sorted(root.rglob("*"))
            if path.is_file() and path.relative_to(root).parts[0] != ".git"
        }

    return _tree


@pytest.fixture
def rsa_pem() -> bytes:
    """Return an unencrypted RSA key in traditional PEM (PKCS#1) encoding."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def encrypted_rsa_pem() -> bytes:
    """Return an RSA key in PKCS#8 PEM encoding protected by ``KEY_PASSPHRASE``."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.BestAvailableEncryption(KEY_PASSPHRASE.encode()),
    )


@pytest.fixture
def ed25519_openssh() -> bytes:
    """Return an unencrypted ED25519 key in OpenSSH encoding, as written by ``ssh-keygen``."""
    key = ed25519.Ed25519PrivateKey.generate()
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def gitpython_mocks(mocker: MockerFixture) -> dict[str, MagicMock]:
    """Patch the GitPython calls made by ``clone_repo`` so that nothing touches the network."""
    mock_repo = MagicMock()
    mock_clone_from = mocker.patch("mercator.clone.git.Repo.clone_from", return_value=mock_repo)
    mock_resolve = mocker.patch("mercator.clone.resolve_branch_reference", return_value=DEMO_COMMIT)
    mock_git_installed = mocker.patch("mercator.clone.ensure_git_installed")

    return {
        "repo": mock_repo,
        "clone_from": mock_clone_from,
        "resolve": mock_resolve,
        "git_installed": mock_git_installed,
    }

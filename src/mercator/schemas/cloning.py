"""Schema for the cloning process."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CloneOptions(BaseModel):
    """Credential material for a clone.

    Attributes
    ----------
    pem_bytes : bytes
        PEM or OpenSSH encoded private key. Empty means no authentication is attempted.
    pem_password : str | None
        Passphrase protecting ``pem_bytes``, if any.

    """

    pem_bytes: bytes = Field(default=b"", repr=False)
    pem_password: str | None = Field(default=None, repr=False)

    @property
    def has_key(self) -> bool:
        """Whether key material was supplied."""
        return len(self.pem_bytes) > 0


class CloneConfig(BaseModel):
    """Configuration for cloning a Git repository.

    This model holds the necessary parameters for cloning a single branch of a repository to a
    local path, including the credentials used to reach it.

    Attributes
    ----------
    url : str
        The URL of the Git repository to clone (``https://``, ``ssh://``, SCP-like or local).
    local_path : str
        The local directory where the repository will be cloned.
    branch : str | None
        The short name of the branch to clone. ``None`` selects the remote's default branch.
    options : CloneOptions
        SSH credential material (default: no credentials).
    known_hosts_path : str | None
        ``known_hosts`` file used to verify the remote host key over SSH (default: ssh's own).
    show_progress : bool
        Whether to stream transfer progress to ``stdout`` (default: ``True``).

    """

    url: str
    local_path: str
    branch: str | None = None
    options: CloneOptions = Field(default_factory=CloneOptions)
    known_hosts_path: str | None = None
    show_progress: bool = Field(default=True)

"""Configuration for the mercator package."""

from __future__ import annotations

import os

DEFAULT_TIMEOUT = int(os.getenv("MERCATOR_CLONE_TIMEOUT", "600"))  # seconds

# User presented to git hosting providers over SSH (``git@github.com``, ``git@gitlab.com``, ...)
SSH_USER = "git"

# Environment variable pointing host-key verification at a custom ``known_hosts`` file
KNOWN_HOSTS_ENV_VAR = "SSH_KNOWN_HOSTS"

KEY_PASSPHRASE_ENV_VAR = "MERCATOR_KEY_PASSPHRASE"

LOG_LEVEL = os.getenv("MERCATOR_LOG_LEVEL", "INFO")

"""Shared credentials file location, reading and parsing into named identities."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .discovery.models import Identity
from .exceptions import CredentialsError

logger = logging.getLogger(__name__)

ACCESS_KEY_FIELD = "aws_access_key_id"
SECRET_KEY_FIELD = "aws_secret_access_key"


def default_credentials_path() -> Path:
    """``~/.aws/credentials`` for the current user."""
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise CredentialsError("Failed to determine home directory") from exc
    return home / ".aws" / "credentials"


def read_credentials_file(path: str | Path) -> list[str]:
    """Read the credentials file as lines. Undecodable bytes are replaced rather than fatal."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read().splitlines()
    except OSError as exc:
        raise CredentialsError(
            f"Error reading AWS credentials file {path}: {exc.strerror or exc}", path=str(path)
        ) from exc


def parse_credentials(lines: Iterable[str]) -> list[Identity]:
    """Parse INI-like credentials text into identities, in declaration order.

    An identity is emitted as soon as a profile name, an access key and a
    secret key are all pending; the three are then cleared. Values left
    pending without a profile name are kept until overwritten, so a key
    written before the first ``[section]`` is either silently dropped or
    paired with that section's other half.

    A repeated profile name keeps its first position and its last keys.
    """
    identities: dict[str, Identity] = {}
    profile: str | None = None
    access_key: str | None = None
    secret_key: str | None = None

    for line in lines:
        field_name, sep, value = line.partition("=")
        field_name = field_name.strip()

        if field_name in (ACCESS_KEY_FIELD, SECRET_KEY_FIELD):
            if not sep:
                logger.debug("Skipping malformed credentials line for %s", field_name)
                continue
            if field_name == ACCESS_KEY_FIELD:
                access_key = value.strip()
            else:
                secret_key = value.strip()
        elif field_name.startswith("["):
            profile = field_name.replace("[", "").replace("]", "")

        if profile is not None and access_key is not None and secret_key is not None:
            if profile in identities:
                logger.debug("Profile %s defined more than once, keeping the last keys", profile)
            identities[profile] = Identity(name=profile, access_key=access_key, secret_key=secret_key)
            profile = access_key = secret_key = None

    return list(identities.values())


def load_identities(path: str | Path | None = None) -> list[Identity]:
    """Locate, read and parse the credentials file. Raises CredentialsError."""
    if not path:
        path = default_credentials_path()
    identities = parse_credentials(read_credentials_file(path))
    logger.info("Loaded %d profiles from %s", len(identities), path)
    return identities

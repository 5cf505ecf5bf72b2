"""Credential resolution and properties-file loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

ACCESS_KEY = "access-key"
SECRET_KEY = "secret-key"

_COMMENT_PREFIXES = ("#", "!")


@dataclass(frozen=True)
class Credentials:
    """Access/secret key pair. Both ``None`` means anonymous access."""

    access_key: str | None = None
    secret_key: str | None = None

    @property
    def anonymous(self) -> bool:
        return self.access_key is None or self.secret_key is None

    def __repr__(self) -> str:
        # Never render the secret.
        if self.anonymous:
            return "Credentials(anonymous)"
        return f"Credentials(access_key={self.access_key!r}, secret_key='***')"


ANONYMOUS = Credentials()


def _from_source(source: Mapping[str, object] | None) -> Credentials | None:
    if not source:
        return None
    access_key = source.get(ACCESS_KEY)
    secret_key = source.get(SECRET_KEY)
    if not access_key or not secret_key:
        return None
    return Credentials(str(access_key), str(secret_key))


def resolve_credentials(
    config: Mapping[str, object] | None = None,
    properties: Mapping[str, str] | None = None,
) -> Credentials:
    """Pick credentials from *config*, else *properties*, else anonymous.

    A source that supplies only one of ``access-key``/``secret-key`` is
    treated as absent and resolution falls through to the next source.
    """
    credentials = _from_source(config)
    if credentials is not None:
        logger.debug("Using credentials from explicit configuration")
        return credentials

    credentials = _from_source(properties)
    if credentials is not None:
        logger.debug("Using credentials from properties")
        return credentials

    logger.debug("No credentials configured; using anonymous access")
    return ANONYMOUS


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties-file ``key=value`` / ``key: value`` lines.

    Blank lines and lines starting with ``#`` or ``!`` are skipped. A line
    with no separator maps the whole line to an empty value.
    """
    properties: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        positions = [pos for pos in (line.find("="), line.find(":")) if pos != -1]
        if not positions:
            properties[line] = ""
            continue
        cut = min(positions)
        properties[line[:cut].strip()] = line[cut + 1 :].strip()
    return properties


def load_properties(path: str | Path) -> dict[str, str]:
    """Read a properties file. Raises ``FileNotFoundError`` if it is missing."""
    path = Path(path)
    properties = parse_properties(path.read_text(encoding="utf-8"))
    logger.debug("Loaded %d properties from %s", len(properties), path)
    return properties


def no_properties() -> dict[str, str]:
    """Default properties source: nothing is discovered implicitly."""
    return {}

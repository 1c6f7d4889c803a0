"""Version resolution.

Maps a requested vsntag (or no vsntag at all) to the version records
that must be generated. Primary vsntags take precedence over alt
vsntags; among records claiming the same tag the first declared wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .exceptions import VersionNotFoundError
from .models import ScopeConfig, VersionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Version records selected for one invocation."""
    versions: Tuple[VersionRecord, ...]
    requested: Optional[str] = None
    matched_alias: Optional[str] = None  # diagnostic only

    @property
    def all_versions(self) -> bool:
        return not self.requested


def find_duplicate_tags(config: ScopeConfig) -> Dict[str, List[str]]:
    """Find tags claimed by more than one version record.

    Returns:
        Mapping of tag -> vsntags of every record claiming it, in
        declaration order. Empty when the configuration is consistent.
    """
    tags = dict.fromkeys(
        tag for version in config.versions for tag in (version.vsntag, *version.altvsntags)
    )
    duplicates: Dict[str, List[str]] = {}
    for tag in tags:
        owners = [version.vsntag for version in config.versions if version.claims(tag)]
        if len(owners) > 1:
            duplicates[tag] = owners
    return duplicates


def _warn_duplicates(config: ScopeConfig, tag: Optional[str]) -> None:
    for dup, owners in find_duplicate_tags(config).items():
        if tag and dup != tag:
            continue
        logger.warning(
            "Tag '%s' is claimed by versions %s in scope '%s'; using '%s'",
            dup,
            ", ".join(f"'{owner}'" for owner in owners),
            config.scopetag,
            owners[0],
        )


def resolve_versions(tag: Optional[str], config: ScopeConfig) -> Resolution:
    """Resolve a vsntag against the configured versions.

    Args:
        tag: Requested vsntag or alt vsntag. ``None`` or empty selects
            every version in declaration order.
        config: Scope configuration of the run

    Returns:
        Resolution holding the selected version record(s)

    Raises:
        VersionNotFoundError: If ``tag`` is given and matches no version
    """
    _warn_duplicates(config, tag)

    if not tag:
        return Resolution(versions=tuple(config.versions))

    for version in config.versions:
        if version.vsntag == tag:
            return Resolution(versions=(version,), requested=tag)

    for version in config.versions:
        if tag in version.altvsntags:
            return Resolution(versions=(version,), requested=tag, matched_alias=tag)

    raise VersionNotFoundError(tag)


class VersionResolver:
    """Resolver bound to one scope configuration."""

    def __init__(self, config: ScopeConfig):
        self.config = config

    def resolve(self, tag: Optional[str] = None) -> Resolution:
        return resolve_versions(tag, self.config)

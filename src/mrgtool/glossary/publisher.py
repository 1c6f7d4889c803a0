"""Merged glossary publishing.

For one version record: interpret its term selection criteria, merge the
result into an MRG, write the canonical file and point the default and
alt-version aliases at it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .exceptions import GlossaryError, TermResolutionError
from .fileio import ensure_link, write_file
from .interpreter import TermInterpreter, TermSelectionInterpreter
from .models import (
    MergedGlossary,
    PublishResult,
    ScopeConfig,
    ScopeRef,
    Terminology,
    VersionRecord,
    mrg_filename,
)
from .rendering import dump_mrg, sort_entries

logger = logging.getLogger(__name__)


def build_terminology(config: ScopeConfig, version: VersionRecord) -> Terminology:
    """Terminology header for ``version`` of the configured scope."""
    return Terminology(
        scopetag=config.scope.scopetag,
        scopedir=config.scope.scopedir,
        curatedir=config.scope.curatedir,
        vsntag=version.vsntag,
        altvsntags=list(version.altvsntags),
    )


def resolve_scopes(scopes: List[ScopeRef], config: ScopeConfig) -> List[ScopeRef]:
    """Fill in scope directories from the config, dropping unknown scopes.

    Order of ``scopes`` is preserved. The input list is not modified.
    """
    resolved: List[ScopeRef] = []
    for scope in scopes:
        known = config.find_scope(scope.scopetag)
        if known is not None:
            resolved.append(ScopeRef(scopetag=scope.scopetag, scopedir=known.scopedir))
    return resolved


class GlossaryPublisher:
    """Publishes MRG files for the versions of one scope."""

    def __init__(self, config: ScopeConfig, interpreter: Optional[TermInterpreter] = None):
        self.config = config
        self.interpreter = interpreter or TermSelectionInterpreter(config)

    def build(self, version: VersionRecord) -> MergedGlossary:
        """Build the merged glossary for ``version`` without writing anything.

        Raises:
            TermResolutionError: If the term selection criteria cannot be resolved
        """
        try:
            tuc = self.interpreter.interpret(version.termselcrit)
        except TermResolutionError as exc:
            if exc.vsntag is not None:
                raise
            raise TermResolutionError(exc.reason, vsntag=version.vsntag) from exc
        except (GlossaryError, ValueError, KeyError, OSError) as exc:
            raise TermResolutionError(str(exc), vsntag=version.vsntag) from exc

        return MergedGlossary(
            terminology=build_terminology(self.config, version),
            scopes=resolve_scopes(tuc.scopes, self.config),
            entries=sort_entries(tuc.entries),
        )

    def publish(self, version: VersionRecord) -> PublishResult:
        """Write the canonical MRG file for ``version`` and reconcile its aliases.

        Write failures are reported in the result (and logged), not raised.
        If the canonical file cannot be written no alias is touched.

        Raises:
            TermResolutionError: If the term selection criteria cannot be resolved
        """
        mrg = self.build(version)
        scopetag = mrg.terminology.scopetag
        glossary_path = self.config.glossary_path
        result = PublishResult(vsntag=version.vsntag)

        mrg_file = mrg_filename(scopetag, version.vsntag)
        canonical = glossary_path / mrg_file
        if not write_file(canonical, dump_mrg(mrg)):
            result.errors.append(
                f"Failed to write MRG '{canonical}' for version '{version.vsntag}' of scope '{scopetag}'"
            )
            return result
        result.canonical = canonical
        logger.info("Wrote %s (%d entries)", canonical, len(mrg.entries))

        if self.config.defaultvsn == version.vsntag:
            logger.info("Creating symlink for default version '%s'", version.vsntag)
            self._link(result, glossary_path / mrg_filename(scopetag), mrg_file)

        for altvsntag in version.altvsntags:
            logger.info("Creating symlink for altvsntag '%s'", altvsntag)
            self._link(result, glossary_path / mrg_filename(scopetag, altvsntag), mrg_file)

        return result

    def _canonical_names(self, scopetag: str) -> set[str]:
        return {mrg_filename(scopetag, version.vsntag) for version in self.config.versions}

    def _link(self, result: PublishResult, alias: Path, target: str) -> None:
        if alias.name == target or alias.name in self._canonical_names(self.config.scopetag):
            logger.error("Refusing to replace canonical MRG '%s' with a link to '%s'", alias, target)
            result.errors.append(
                f"Alias '{alias}' would overwrite a canonical MRG for version '{result.vsntag}'"
            )
            return
        if ensure_link(alias, target):
            result.aliases.append(alias)
        else:
            result.errors.append(
                f"Failed to link '{alias}' to '{target}' for version '{result.vsntag}'"
            )
